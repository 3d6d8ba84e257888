"""Error taxonomy shared by services, the HTTP API and the tool server."""


class ChainGateError(Exception):
    """Base for every error the services raise on purpose."""


class ValidationError(ChainGateError):
    """Malformed address, amount or method call. Never retried."""


class MethodNotFoundError(ValidationError):
    def __init__(self, method: str, address: str) -> None:
        super().__init__(f"Method {method} not found in contract {address}")
        self.method = method
        self.address = address


class NotFoundError(ChainGateError):
    """Missing chain, transaction or user."""


class AbiUnavailableError(NotFoundError):
    """Explorer returned no verified ABI for the contract."""


class ConfigurationError(ChainGateError):
    """No RPC endpoint or explorer mapping. Fixable by the operator."""


class UnsupportedChainError(ConfigurationError):
    def __init__(self, chain_id: str) -> None:
        super().__init__(f"No explorer API configured for chain ID {chain_id}")
        self.chain_id = chain_id


class InvalidFormatError(ChainGateError):
    """Contract interface description could not be parsed."""


class ChainConnectionError(ChainGateError):
    """RPC client handle could not be built for a chain."""


class SubmissionError(ChainGateError):
    """Broadcasting a signed transaction failed. The cause is chained."""


class InvalidStateError(ChainGateError):
    def __init__(self, tx_id: str, status: str, action: str = "submitted") -> None:
        super().__init__(f"Transaction {tx_id} cannot be {action} (status: {status})")
        self.tx_id = tx_id
        self.status = status


class ExternalServiceError(ChainGateError):
    """Explorer HTTP failure or rate limit. Retriable."""
