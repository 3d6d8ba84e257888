from enum import Enum


class ChainId(str, Enum):
    """Well-known EVM networks with built-in RPC and explorer mappings. Values are EIP-155 chain ids."""

    ETHEREUM = "1"
    SEPOLIA = "11155111"
    POLYGON = "137"
    POLYGON_MUMBAI = "80001"
