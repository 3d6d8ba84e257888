from typing import Any

from sqlalchemy import JSON, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from chaingate.db.session import Base, TimestampMixin
from chaingate.domain.enums import AbiSource


class ContractAbi(TimestampMixin, Base):
    """Cached contract interface. Keyed by (lowercased address, chain id)."""

    __tablename__ = "contract_abis"
    __table_args__ = (UniqueConstraint("address", "chain_id", name="uq_contract_abis_address_chain_id"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    address: Mapped[str] = mapped_column(String(42), index=True)
    chain_id: Mapped[str] = mapped_column(ForeignKey("chains.id"))
    abi: Mapped[list[dict[str, Any]]] = mapped_column(JSON)
    source: Mapped[str] = mapped_column(String(20), default=AbiSource.ETHERSCAN.value)
