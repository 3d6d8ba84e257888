from typing import Optional

from fastapi import APIRouter, HTTPException, Query, status

from chaingate.accounts.service import AccountService, BalanceInfo
from chaingate.api.deps import DbDep, EtherscanDep, ProvidersDep
from chaingate.api.schemas.chains import ChainList, ContractReadResponse
from chaingate.chains.registry import ChainRegistry
from chaingate.contracts.reader import ContractReader
from chaingate.domain.models.chain import ChainView

router = APIRouter(prefix="/api/v1/chains", tags=["chains"])


def split_args(raw: Optional[str]) -> list[str]:
    """``a,b`` query form used by the UI. Empty string means no arguments."""
    if not raw:
        return []
    return [part.strip() for part in raw.split(",")]


@router.get("", response_model=ChainList, response_model_by_alias=True)
async def list_chains(db: DbDep) -> ChainList:
    chains = await ChainRegistry(db).list_active()
    return ChainList(chains=[ChainView.model_validate(c) for c in chains], total=len(chains))


@router.get("/{chain_id}", response_model=ChainView, response_model_by_alias=True)
async def get_chain(chain_id: str, db: DbDep) -> ChainView:
    chain = await ChainRegistry(db).get_by_id(chain_id)
    if chain is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Chain with ID {chain_id} not found")
    return ChainView.model_validate(chain)


@router.get("/{chain_id}/balance/{address}", response_model=BalanceInfo)
async def get_balance(chain_id: str, address: str, db: DbDep, providers: ProvidersDep) -> BalanceInfo:
    return await AccountService(db, providers).get_balance(chain_id, address)


@router.get("/{chain_id}/contract/{address}/read", response_model=ContractReadResponse)
async def read_contract(
    chain_id: str,
    address: str,
    db: DbDep,
    providers: ProvidersDep,
    explorer: EtherscanDep,
    method: str = Query(..., min_length=1),
    args: Optional[str] = Query(None, description="Comma-separated method arguments"),
) -> ContractReadResponse:
    """Call a read-only contract method. A freshly fetched ABI is cached, hence the commit."""
    result = await ContractReader(db, providers, explorer).read(chain_id, address, method, split_args(args))
    await db.commit()
    return ContractReadResponse(address=address, method=method, result=result)
