from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class ChainView(BaseModel):
    """Public chain fields. The RPC URL is left out since it embeds the provider credential."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    id: str
    name: str
    currency: str
    explorer_url: str
    is_testnet: bool
    is_active: bool
