import uuid

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from chaingate.domain.models.transaction import TransactionView


class PrepareTransactionBody(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    chain_id: str
    to: str
    value: str = "0"
    data: str | None = None
    gas_limit: str | None = None


class PrepareTransactionResponse(BaseModel):
    id: uuid.UUID
    url: str
    transaction: TransactionView


class SubmitTransactionBody(BaseModel):
    signed_transaction: str = Field(alias="signedTransaction", min_length=1)

    model_config = ConfigDict(populate_by_name=True)


class TransactionList(BaseModel):
    transactions: list[TransactionView]
    total: int
