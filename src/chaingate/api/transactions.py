import uuid

from fastapi import APIRouter, HTTPException, status

from chaingate.api.deps import CurrentUserDep, DbDep, ProvidersDep, SettingsDep, WatcherDep
from chaingate.api.schemas.transactions import (
    PrepareTransactionBody,
    PrepareTransactionResponse,
    SubmitTransactionBody,
)
from chaingate.chains.registry import ChainRegistry
from chaingate.config import Settings
from chaingate.db.models.user import User
from chaingate.domain.models.transaction import PrepareTransactionRequest, SubmitResult, TransactionView
from chaingate.exceptions import NotFoundError
from chaingate.transactions.service import TransactionService

router = APIRouter(prefix="/api/v1/transaction", tags=["transactions"])


def ensure_can_act(transaction: TransactionView | None, tx_id: uuid.UUID, user: User, settings: Settings) -> None:
    """Owner only, except agent-prepared transactions which any signed-in user may review."""
    if transaction is None:
        raise NotFoundError(f"Transaction with ID {tx_id} not found")
    owner_id = None if transaction.user_id == settings.default_user_id else transaction.user_id
    if owner_id is not None and owner_id != str(user.id):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not the owner of this transaction")


@router.post(
    "/prepare",
    response_model=PrepareTransactionResponse,
    response_model_by_alias=True,
    status_code=status.HTTP_201_CREATED,
)
async def prepare_transaction(
    body: PrepareTransactionBody,
    db: DbDep,
    providers: ProvidersDep,
    settings: SettingsDep,
    user: CurrentUserDep,
) -> PrepareTransactionResponse:
    if await ChainRegistry(db).get_by_id(body.chain_id) is None:
        raise NotFoundError(f"Chain with ID {body.chain_id} not found")

    transaction = await TransactionService(db, providers).prepare(
        PrepareTransactionRequest(
            chain_id=body.chain_id,
            to=body.to,
            value=body.value,
            data=body.data,
            gas_limit=body.gas_limit,
            user_id=str(user.id),
        )
    )
    return PrepareTransactionResponse(
        id=transaction.id,
        url=settings.transaction_url(str(transaction.id)),
        transaction=transaction,
    )


@router.get("/{tx_id}", response_model=TransactionView, response_model_by_alias=True)
async def get_transaction(tx_id: uuid.UUID, db: DbDep, providers: ProvidersDep) -> TransactionView:
    """Public so the review link works before the user signs in."""
    transaction = await TransactionService(db, providers).get(tx_id)
    if transaction is None:
        raise NotFoundError(f"Transaction with ID {tx_id} not found")
    return transaction


@router.post("/{tx_id}/approve", response_model=TransactionView, response_model_by_alias=True)
async def approve_transaction(
    tx_id: uuid.UUID, db: DbDep, providers: ProvidersDep, settings: SettingsDep, user: CurrentUserDep
) -> TransactionView:
    service = TransactionService(db, providers)
    ensure_can_act(await service.get(tx_id), tx_id, user, settings)
    return await service.approve(tx_id)


@router.post("/{tx_id}/reject", response_model=TransactionView, response_model_by_alias=True)
async def reject_transaction(
    tx_id: uuid.UUID, db: DbDep, providers: ProvidersDep, settings: SettingsDep, user: CurrentUserDep
) -> TransactionView:
    service = TransactionService(db, providers)
    ensure_can_act(await service.get(tx_id), tx_id, user, settings)
    return await service.reject(tx_id)


@router.post("/{tx_id}/submit", response_model=SubmitResult, response_model_by_alias=True)
async def submit_transaction(
    tx_id: uuid.UUID,
    body: SubmitTransactionBody,
    db: DbDep,
    providers: ProvidersDep,
    watcher: WatcherDep,
    settings: SettingsDep,
    user: CurrentUserDep,
) -> SubmitResult:
    service = TransactionService(db, providers, watcher)
    ensure_can_act(await service.get(tx_id), tx_id, user, settings)
    return await service.submit(tx_id, body.signed_transaction)
