from fastapi import APIRouter, HTTPException, status

from chaingate.api.deps import DbDep
from chaingate.api.schemas.auth import ApiKeyCreate, ApiKeyResponse, LoginBody, LoginResponse, UserResponse
from chaingate.db.repos.user_repo import UserRepo

router = APIRouter(prefix="/api/v1/auth", tags=["auth"])


@router.post("/apikey", response_model=ApiKeyResponse, response_model_by_alias=True, status_code=status.HTTP_201_CREATED)
async def create_api_key(body: ApiKeyCreate, db: DbDep) -> ApiKeyResponse:
    """Register a user. The plaintext key is returned once and cannot be recovered."""
    user, api_key = await UserRepo(db).create(name=body.name)
    await db.commit()
    await db.refresh(user)
    return ApiKeyResponse(user=UserResponse.model_validate(user), api_key=api_key)


@router.post("/login", response_model=LoginResponse, response_model_by_alias=True)
async def login(body: LoginBody, db: DbDep) -> LoginResponse:
    user = await UserRepo(db).get_by_api_key(body.api_key)
    if user is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid API key")
    return LoginResponse(token=body.api_key, user=UserResponse.model_validate(user))
