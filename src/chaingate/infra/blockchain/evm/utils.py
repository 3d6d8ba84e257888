"""Address and unit helpers. All amount math is exact Decimal, never float."""

from decimal import Decimal, InvalidOperation

from eth_utils import from_wei, is_checksum_address, is_hex_address, to_wei

from chaingate.exceptions import ValidationError

NATIVE_DECIMALS = 18


def is_valid_address(address: object) -> bool:
    """True for 0x-prefixed 20-byte hex. Mixed-case input must carry a valid EIP-55 checksum."""
    if not isinstance(address, str) or not address.startswith("0x") or not is_hex_address(address):
        return False
    body = address[2:]
    return body.islower() or body.isupper() or is_checksum_address(address)


def require_address(address: object, label: str = "address") -> str:
    if not is_valid_address(address):
        raise ValidationError(f"Invalid {label}: {address}")
    return address  # type: ignore[return-value]


def format_native(amount_wei: int) -> str:
    """Render a smallest-unit integer in display units, e.g. 1500000000000000000 -> "1.5"."""
    value = from_wei(amount_wei, "ether")
    text = format(Decimal(value), "f")
    if "." in text:
        text = text.rstrip("0")
        if text.endswith("."):
            text += "0"
    else:
        text += ".0"
    return text


def parse_native(amount: str) -> int:
    """Parse a display-unit decimal string to a smallest-unit integer.

    Rejects negatives, non-numeric text, exponents and more than 18 fractional digits.
    """
    if not isinstance(amount, str) or not amount.strip():
        raise ValidationError(f"Invalid amount: {amount}")
    text = amount.strip()
    try:
        value = Decimal(text)
    except InvalidOperation as e:
        raise ValidationError(f"Invalid amount: {amount}") from e

    if not value.is_finite() or "e" in text.lower() or value < 0:
        raise ValidationError(f"Invalid amount: {amount}")
    exponent = value.as_tuple().exponent
    if isinstance(exponent, int) and -exponent > NATIVE_DECIMALS:
        raise ValidationError(f"Invalid amount: {amount} has more than {NATIVE_DECIMALS} decimals")
    return int(to_wei(value, "ether"))
