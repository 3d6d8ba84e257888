"""Domain types for the prepare -> sign -> submit -> confirm workflow."""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    """Serialized with camelCase keys, the shape the browser UI and tool callers read."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class PrepareTransactionRequest(_CamelModel):
    chain_id: str
    to: str
    value: str = "0"  # Native units, decimal string
    data: Optional[str] = None
    gas_limit: Optional[str] = None
    user_id: str = "system"


class TransactionView(_CamelModel):
    id: uuid.UUID
    chain_id: str
    user_id: str
    from_addr: Optional[str] = Field(default=None, alias="from")
    to_addr: str = Field(alias="to")
    value: str
    data: Optional[str] = None
    gas_limit: Optional[str] = None
    status: str
    tx_hash: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class SubmitResult(_CamelModel):
    id: uuid.UUID
    status: str
    tx_hash: Optional[str] = None
