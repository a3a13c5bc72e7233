import asyncio
import logging
from functools import wraps

from sqlalchemy.exc import DisconnectionError, InterfaceError, OperationalError
from tenacity import (
    AsyncRetrying,
    RetryError,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from .exceptions import StoreUnavailable
from .settings import Settings

logger = logging.getLogger(__name__)

TRANSIENT_ERRORS = (
    OperationalError,
    InterfaceError,
    DisconnectionError,
    asyncio.TimeoutError,
    ConnectionError,
)

DEFAULT_TIMEOUT = Settings.model_fields["STORE_TIMEOUT_SECONDS"].default
DEFAULT_ATTEMPTS = Settings.model_fields["STORE_RETRY_ATTEMPTS"].default


def _session(args):
    return getattr(args[0], "db", None) if args else None


def _limits(args) -> tuple[float, int]:
    # Settings travel on the session (see build_sessionmaker).
    db = _session(args)
    config = db.info.get("settings") if db is not None else None
    if config is None:
        return DEFAULT_TIMEOUT, DEFAULT_ATTEMPTS
    return config.STORE_TIMEOUT_SECONDS, config.STORE_RETRY_ATTEMPTS


async def _reset_session(args):
    db = _session(args)
    if db is not None:
        await db.rollback()


def store_call(*, idempotent: bool):
    """Guard a repository coroutine with a deadline.

    Idempotent calls (reads, existence checks) are retried with backoff on
    transient failures; writes get a single attempt. Either way a transient
    failure surfaces as StoreUnavailable.
    """

    def decorator(func):
        @wraps(func)
        async def wrapper(*args, **kwargs):
            timeout, retry_attempts = _limits(args)
            attempts = retry_attempts if idempotent else 1

            try:
                async for attempt in AsyncRetrying(
                    stop=stop_after_attempt(max(attempts, 1)),
                    wait=wait_exponential(multiplier=0.2, min=0.2, max=2),
                    retry=retry_if_exception_type(TRANSIENT_ERRORS),
                    reraise=False,
                ):
                    with attempt:
                        try:
                            return await asyncio.wait_for(
                                func(*args, **kwargs), timeout=timeout
                            )
                        except TRANSIENT_ERRORS:
                            await _reset_session(args)
                            raise
            except RetryError as e:
                cause = e.last_attempt.exception()
                logger.error(
                    f"Store call {func.__qualname__} failed after {attempts} attempt(s): {cause}"
                )
                raise StoreUnavailable() from cause

        return wrapper

    return decorator
