"""Session management for database operations.

This module provides utilities for handling SQLAlchemy async sessions
with proper lifecycle management, error handling, and transaction support.
"""

from typing import AsyncGenerator, Callable, Optional, TypeVar
import inspect
import logging
from functools import wraps

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError

from shortlink.db.base import get_session

logger = logging.getLogger(__name__)

# Generic return type for function decorators
T = TypeVar("T")


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency for database sessions.

    Every request gets its own session from the shared engine's pool.
    The session is rolled back if the request handler raises.

    Yields:
        AsyncSession: A SQLAlchemy async session object.
    """
    async with get_session() as session:
        try:
            yield session
        except SQLAlchemyError:
            logger.exception("Database error occurred")
            await session.rollback()
            raise
        except Exception:
            await session.rollback()
            raise


def _find_session_param(func: Callable, db_param_name: Optional[str]):
    """Return (position, name) of the session parameter of ``func``."""
    parameters = inspect.signature(func).parameters
    for i, (param_name, param) in enumerate(parameters.items()):
        annotation = param.annotation
        is_async_session = annotation is AsyncSession or (
            hasattr(annotation, "__origin__") and AsyncSession in getattr(annotation, "__args__", [])
        )
        if db_param_name and param_name == db_param_name:
            if not is_async_session:
                logger.warning(
                    f"Parameter '{db_param_name}' in function '{func.__name__}' is not annotated "
                    f"as AsyncSession."
                )
            return i, param_name
        if is_async_session and db_param_name is None:
            return i, param_name

    param_info = ", ".join(f"{name}: {param.annotation}" for name, param in parameters.items())
    logger.warning(
        f"Unable to find database session parameter in function '{func.__name__}'. "
        f"Available parameters: {param_info}"
    )
    return None, None


def db_transaction(db_param_name: Optional[str] = None) -> Callable:
    """Decorator to wrap functions in a database transaction.

    Finds the database session parameter, commits on success or rolls back
    on error.

    Args:
        db_param_name: Optional name of the database session parameter.
            If not provided, the first parameter annotated as AsyncSession
            is used.

    Returns:
        Callable: Decorator function

    Example:
        ```python
        @db_transaction(db_param_name="db")
        async def create_mapping(self, db: AsyncSession, url: str) -> Mapping:
            ...
        ```

    Raises:
        ValueError: If no database session is passed at call time
    """
    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        db_param_pos, db_param_key = _find_session_param(func, db_param_name)

        @wraps(func)
        async def wrapper(*args, **kwargs):
            db = None

            if db_param_key is not None and db_param_key in kwargs:
                db = kwargs[db_param_key]
            elif db_param_pos is not None and len(args) > db_param_pos:
                db = args[db_param_pos]
            else:
                for value in list(args) + list(kwargs.values()):
                    if isinstance(value, AsyncSession):
                        db = value
                        break

            if db is None:
                raise ValueError(
                    f"Database session not found in function arguments for '{func.__name__}'."
                )

            try:
                result = await func(*args, **kwargs)
                await db.commit()
                return result
            except Exception as e:
                await db.rollback()
                logger.debug(f"Transaction rolled back in '{func.__name__}': {e!r}")
                raise

        return wrapper
    return decorator


# Provide the session dependency as a shorthand for FastAPI routes
db_dependency = Depends(get_db)
