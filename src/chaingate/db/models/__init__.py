from chaingate.db.models.chain import Chain
from chaingate.db.models.contract_abi import ContractAbi
from chaingate.db.models.transaction import TransactionRecord
from chaingate.db.models.user import User

__all__ = [
    "Chain",
    "ContractAbi",
    "TransactionRecord",
    "User",
]
