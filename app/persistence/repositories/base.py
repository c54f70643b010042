"""Base repository with storage error translation."""

import functools
import logging
from typing import Any, Awaitable, Callable, Generic, Type, TypeVar

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import StorageError
from app.persistence.database import Base

logger = logging.getLogger(__name__)

ModelType = TypeVar("ModelType", bound=Base)
F = TypeVar("F", bound=Callable[..., Awaitable[Any]])


def storage_operation(func: F) -> F:
    """Translate SQLAlchemy failures into StorageError and roll back the session."""

    @functools.wraps(func)
    async def wrapper(self: "BaseRepository", *args: Any, **kwargs: Any) -> Any:
        try:
            return await func(self, *args, **kwargs)
        except SQLAlchemyError as e:
            logger.error(
                f"{type(self).__name__}.{func.__name__} failed: {e}",
                exc_info=True,
            )
            await self.session.rollback()
            raise StorageError(f"Storage operation {func.__name__} failed") from e

    return wrapper  # type: ignore[return-value]


class BaseRepository(Generic[ModelType]):
    """Base repository with common lookup and write helpers."""

    def __init__(self, model: Type[ModelType], session: AsyncSession):
        """Initialize repository with model and session."""
        self.model = model
        self.session = session

    @storage_operation
    async def get_by_id(self, id: Any) -> ModelType | None:
        """Get entity by ID, refreshing any copy already held by the session."""
        stmt = (
            select(self.model)
            .where(self.model.id == id)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    @storage_operation
    async def create(self, **data: Any) -> ModelType:
        """Create and persist a new entity."""
        instance = self.model(**data)
        self.session.add(instance)
        await self.session.commit()
        await self.session.refresh(instance)
        return instance

    @storage_operation
    async def delete(self, id: Any) -> bool:
        """Delete entity by ID."""
        instance = await self.get_by_id(id)
        if instance is None:
            return False
        await self.session.delete(instance)
        await self.session.commit()
        return True
