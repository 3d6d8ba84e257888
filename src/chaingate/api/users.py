from fastapi import APIRouter

from chaingate.api.deps import CurrentUserDep, DbDep, ProvidersDep
from chaingate.api.schemas.auth import UserResponse
from chaingate.api.schemas.transactions import TransactionList
from chaingate.transactions.service import TransactionService

router = APIRouter(prefix="/api/v1/user", tags=["user"])


@router.get("/profile", response_model=UserResponse, response_model_by_alias=True)
async def get_profile(user: CurrentUserDep) -> UserResponse:
    return UserResponse.model_validate(user)


@router.get("/transactions", response_model=TransactionList, response_model_by_alias=True)
async def list_transactions(db: DbDep, providers: ProvidersDep, user: CurrentUserDep) -> TransactionList:
    """Newest first."""
    transactions = await TransactionService(db, providers).list_for_user(str(user.id))
    return TransactionList(transactions=transactions, total=len(transactions))
