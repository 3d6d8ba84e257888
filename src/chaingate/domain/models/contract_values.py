"""Typed contract call results.

A decoded return value is turned into a tree of tagged variants using the ABI output types,
then rendered to JSON-friendly Python with one explicit rule per variant.
"""

import re
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, Field

from chaingate.infra.blockchain.evm.utils import format_native

_ARRAY_SUFFIX = re.compile(r"^(?P<inner>.+)\[(?P<size>\d*)\]$")
_INTEGER = re.compile(r"^u?int(?P<bits>\d*)$")

# Integers this wide are usually token or native amounts; narrower ones (decimals, ids, enums) are not.
AMOUNT_BITS = 256


class AddressValue(BaseModel):
    kind: Literal["address"] = "address"
    value: str

    def render(self) -> Any:
        return self.value


class IntegerValue(BaseModel):
    kind: Literal["integer"] = "integer"
    value: int
    bits: int = AMOUNT_BITS

    def render(self) -> Any:
        return str(self.value)


class DecimalValue(BaseModel):
    """A wide integer shown in display units (18 decimals)."""

    kind: Literal["decimal"] = "decimal"
    value: int

    def render(self) -> Any:
        return format_native(self.value)


class TextValue(BaseModel):
    kind: Literal["text"] = "text"
    value: str

    def render(self) -> Any:
        return self.value


class BoolValue(BaseModel):
    kind: Literal["bool"] = "bool"
    value: bool

    def render(self) -> Any:
        return self.value


class BytesValue(BaseModel):
    kind: Literal["bytes"] = "bytes"
    value: str  # 0x-prefixed hex

    def render(self) -> Any:
        return self.value


class SequenceValue(BaseModel):
    kind: Literal["sequence"] = "sequence"
    items: list["ContractValue"] = []

    def render(self) -> Any:
        return [item.render() for item in self.items]


class RecordValue(BaseModel):
    kind: Literal["record"] = "record"
    entries: dict[str, "ContractValue"] = {}

    def render(self) -> Any:
        return {name: entry.render() for name, entry in self.entries.items()}


ContractValue = Annotated[
    Union[
        AddressValue,
        IntegerValue,
        DecimalValue,
        TextValue,
        BoolValue,
        BytesValue,
        SequenceValue,
        RecordValue,
    ],
    Field(discriminator="kind"),
]

SequenceValue.model_rebuild()
RecordValue.model_rebuild()


def _to_hex(raw: Any) -> str:
    if isinstance(raw, (bytes, bytearray)):
        return "0x" + bytes(raw).hex()
    text = str(raw)
    return text if text.startswith("0x") else "0x" + text


def from_abi(param: dict[str, Any], raw: Any) -> ContractValue:
    """Build a tagged value for one ABI parameter (``{"type": ..., "components": [...]}``)."""
    abi_type: str = param.get("type", "")

    array = _ARRAY_SUFFIX.match(abi_type)
    if array:
        inner = {**param, "type": array.group("inner")}
        return SequenceValue(items=[from_abi(inner, item) for item in raw])

    if abi_type == "tuple":
        return _from_components(param.get("components", []), raw)
    if abi_type == "address":
        return AddressValue(value=str(raw))
    if abi_type == "bool":
        return BoolValue(value=bool(raw))
    if abi_type == "string":
        return TextValue(value=str(raw))
    if abi_type.startswith("bytes") or abi_type == "function":
        return BytesValue(value=_to_hex(raw))
    integer = _INTEGER.match(abi_type)
    if integer:
        bits = int(integer.group("bits") or AMOUNT_BITS)
        value = int(raw)
        if bits >= AMOUNT_BITS and value >= 0:
            return DecimalValue(value=value)
        return IntegerValue(value=value, bits=bits)
    return TextValue(value=str(raw))


def _from_components(components: list[dict[str, Any]], raw: Any) -> ContractValue:
    """Named components become a record; unnamed (positional-only) ones a sequence."""
    if raw is None:
        values = []
    elif isinstance(raw, dict):
        values = [raw.get(c.get("name", ""), None) for c in components]
    else:
        values = list(raw)

    if components and all(c.get("name") for c in components):
        return RecordValue(entries={c["name"]: from_abi(c, v) for c, v in zip(components, values)})
    return SequenceValue(items=[from_abi(c, v) for c, v in zip(components, values)])


def from_outputs(outputs: list[dict[str, Any]], raw: Any) -> ContractValue:
    """Tagged value for a whole call result. A single output is unwrapped."""
    if len(outputs) == 1:
        return from_abi(outputs[0], raw)
    return _from_components(outputs, raw)
