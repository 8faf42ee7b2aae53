"""
Database decorators for automatic error handling and rollback.
"""

from collections.abc import Callable
from functools import wraps
from typing import Any, TypeVar

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession


T = TypeVar("T")


def _find_session(args: tuple[Any, ...], kwargs: dict[str, Any]) -> AsyncSession | None:
    session = kwargs.get('session')
    if session is not None:
        return session

    if args:
        if isinstance(args[0], AsyncSession):
            return args[0]
        # Bound service methods keep the session on self
        owner_session = getattr(args[0], 'session', None)
        if isinstance(owner_session, AsyncSession):
            return owner_session

    return None


def with_rollback_on_error(func: Callable[..., T]) -> Callable[..., T]:
    """
    Decorator that automatically rolls back the session on any exception.

    The session is taken from the 'session' keyword argument, the first
    positional argument, or the 'session' attribute of a service instance
    (for methods). The original exception is always re-raised.

    Example:
        class ActivationService:
            @with_rollback_on_error
            async def activate(self, investment_id: int):
                ...
    """
    @wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> T:
        session = _find_session(args, kwargs)

        if session is None:
            logger.warning(
                f"Function {func.__name__} decorated with @with_rollback_on_error "
                f"but no session argument found. Rollback will not be performed."
            )
            return await func(*args, **kwargs)

        try:
            return await func(*args, **kwargs)
        except Exception as e:
            try:
                await session.rollback()
                logger.info(
                    f"Rollback performed in {func.__name__} due to error: {type(e).__name__}"
                )
            except Exception as rollback_error:
                logger.opt(exception=rollback_error).error(
                    "Failed to rollback in {}: {}", func.__name__, rollback_error
                )
            raise

    return wrapper
