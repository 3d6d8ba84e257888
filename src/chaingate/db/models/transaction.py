from typing import Optional

from sqlalchemy import ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from chaingate.db.session import Base, TimestampMixin, UUIDPrimaryKey
from chaingate.domain.enums import TxStatus

NO_DATA = "0x"


class TransactionRecord(UUIDPrimaryKey, TimestampMixin, Base):
    """A transaction prepared for wallet signing, then tracked until it is mined.

    ``value`` is kept as the decimal string the caller gave (native units), never a float.
    """

    __tablename__ = "transactions"
    __table_args__ = (Index("ix_transactions_user_created", "user_id", "created_at"),)

    chain_id: Mapped[str] = mapped_column(ForeignKey("chains.id"))
    user_id: Mapped[str] = mapped_column(String(64))
    from_addr: Mapped[Optional[str]] = mapped_column(String(42), default=None)  # Known once signed
    to_addr: Mapped[str] = mapped_column(String(42))
    value: Mapped[str] = mapped_column(String(80), default="0")
    data: Mapped[str] = mapped_column(Text, default=NO_DATA)
    gas_limit: Mapped[Optional[str]] = mapped_column(String(32), default=None)
    tx_hash: Mapped[Optional[str]] = mapped_column(String(66), default=None, index=True)  # Known once broadcast
    status: Mapped[str] = mapped_column(String(20), default=TxStatus.PENDING.value, index=True)
