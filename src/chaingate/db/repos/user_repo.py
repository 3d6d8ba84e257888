import hashlib
import secrets
import uuid
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from chaingate.db.models.user import User

API_KEY_PREFIX = "cg_"


def hash_api_key(api_key: str) -> str:
    return hashlib.sha256(api_key.encode()).hexdigest()


class UserRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, name: str) -> tuple[User, str]:
        """Create a user and return it with its plaintext API key. The key is not stored."""
        api_key = API_KEY_PREFIX + secrets.token_urlsafe(32)
        user = User(name=name, api_key_hash=hash_api_key(api_key))
        self._session.add(user)
        await self._session.flush()
        return user, api_key

    async def get_by_id(self, user_id: uuid.UUID) -> Optional[User]:
        result = await self._session.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    async def get_by_api_key(self, api_key: str) -> Optional[User]:
        result = await self._session.execute(
            select(User).where(User.api_key_hash == hash_api_key(api_key), User.is_active.is_(True))
        )
        return result.scalar_one_or_none()
