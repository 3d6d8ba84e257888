from sqlalchemy import Boolean, String
from sqlalchemy.orm import Mapped, mapped_column

from chaingate.db.session import Base, TimestampMixin


class Chain(TimestampMixin, Base):
    """A supported network. The id is the EIP-155 chain id as a string and never changes."""

    __tablename__ = "chains"

    id: Mapped[str] = mapped_column(String(32), primary_key=True)
    name: Mapped[str] = mapped_column(String(100))
    currency: Mapped[str] = mapped_column(String(20))
    rpc_url: Mapped[str] = mapped_column(String(500))
    explorer_url: Mapped[str] = mapped_column(String(500))
    is_testnet: Mapped[bool] = mapped_column(Boolean, default=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, index=True)
