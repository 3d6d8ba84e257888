from typing import Any

from pydantic import BaseModel

from chaingate.domain.models.chain import ChainView


class ChainList(BaseModel):
    chains: list[ChainView]
    total: int


class ContractReadResponse(BaseModel):
    address: str
    method: str
    result: Any
