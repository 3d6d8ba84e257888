from sqlalchemy import Boolean, String
from sqlalchemy.orm import Mapped, mapped_column

from chaingate.db.session import Base, TimestampMixin, UUIDPrimaryKey


class User(UUIDPrimaryKey, TimestampMixin, Base):
    """Owner of prepared transactions. Authenticates with an API key used as a bearer token."""

    __tablename__ = "users"

    name: Mapped[str] = mapped_column(String(255))
    api_key_hash: Mapped[str] = mapped_column(String(64), unique=True)  # sha256 hex
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
