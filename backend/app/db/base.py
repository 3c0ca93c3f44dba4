"""Database base and model registry."""

from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class for all database models."""

    pass


def create_all(bind: Engine) -> None:
    """Create every table. Schema migrations are managed outside this service."""
    import app.models  # noqa: F401  registers all models on Base.metadata

    Base.metadata.create_all(bind=bind)


def drop_all(bind: Engine) -> None:
    import app.models  # noqa: F401

    Base.metadata.drop_all(bind=bind)
