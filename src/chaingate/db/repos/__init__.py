from chaingate.db.repos.chain_repo import ChainRepo
from chaingate.db.repos.contract_abi_repo import ContractAbiRepo
from chaingate.db.repos.transaction_repo import TransactionRepo
from chaingate.db.repos.user_repo import UserRepo

__all__ = ["ChainRepo", "ContractAbiRepo", "TransactionRepo", "UserRepo"]
