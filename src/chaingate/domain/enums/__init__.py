from chaingate.domain.enums.chain import ChainId
from chaingate.domain.enums.status import SUBMITTABLE_STATUSES, AbiSource, TxStatus

__all__ = [
    "AbiSource",
    "ChainId",
    "SUBMITTABLE_STATUSES",
    "TxStatus",
]
