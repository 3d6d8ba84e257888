from enum import Enum


class TxStatus(str, Enum):
    """Prepared transaction lifecycle.

    PENDING -> APPROVED | REJECTED, APPROVED -> SUBMITTED, SUBMITTED -> CONFIRMED | FAILED.
    A broadcast or confirmation-watch error moves any state to FAILED.
    """

    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    SUBMITTED = "SUBMITTED"
    CONFIRMED = "CONFIRMED"
    FAILED = "FAILED"


SUBMITTABLE_STATUSES: tuple[TxStatus, ...] = (TxStatus.PENDING, TxStatus.APPROVED)


class AbiSource(str, Enum):
    """Where a cached contract ABI came from."""

    ETHERSCAN = "etherscan"
    MANUAL = "manual"
