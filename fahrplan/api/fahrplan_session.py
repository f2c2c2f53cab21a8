"""
Scoped HTTP session for Fahrplan API calls.

A fresh aiohttp session is created for every logical operation and closed
afterwards. Closing is bounded in time: a close that does not finish within
the configured timeout is cancelled and the session is detached from its
connector, so slow connection teardown cannot stall the caller.
"""

import asyncio
import logging
from types import SimpleNamespace
from typing import Awaitable, Callable, Optional, TypeVar

import aiohttp

from version import get_user_agent
from ..managers.config_manager import APIConfig
from .fahrplan_api import FahrplanAPI

logger = logging.getLogger(__name__)

T = TypeVar("T")

ClientFactory = Callable[[APIConfig], aiohttp.ClientSession]


async def _on_request_start(
    session: aiohttp.ClientSession,
    context: SimpleNamespace,
    params: aiohttp.TraceRequestStartParams,
) -> None:
    logger.info(f"HTTP {params.method} {params.url}")


async def _on_request_end(
    session: aiohttp.ClientSession,
    context: SimpleNamespace,
    params: aiohttp.TraceRequestEndParams,
) -> None:
    logger.info(f"HTTP {params.method} {params.url} -> {params.response.status}")


async def _on_request_exception(
    session: aiohttp.ClientSession,
    context: SimpleNamespace,
    params: aiohttp.TraceRequestExceptionParams,
) -> None:
    logger.warning(f"HTTP {params.method} {params.url} failed: {params.exception}")


def create_request_logger() -> aiohttp.TraceConfig:
    """Trace config that logs every request and its outcome."""
    trace_config = aiohttp.TraceConfig()
    trace_config.on_request_start.append(_on_request_start)
    trace_config.on_request_end.append(_on_request_end)
    trace_config.on_request_exception.append(_on_request_exception)
    return trace_config


def create_http_client(config: APIConfig) -> aiohttp.ClientSession:
    """
    Create the aiohttp session used for one logical operation.

    Must be called from within a running event loop.

    Args:
        config: API configuration (timeout, optional API key)

    Returns:
        aiohttp.ClientSession: New, open session
    """
    headers = {"User-Agent": get_user_agent(), "Accept": "application/json"}
    if config.api_key:
        headers["Authorization"] = f"Bearer {config.api_key}"

    return aiohttp.ClientSession(
        timeout=aiohttp.ClientTimeout(total=config.timeout_seconds),
        headers=headers,
        trace_configs=[create_request_logger()],
    )


async def close_session(session: aiohttp.ClientSession, timeout: float) -> None:
    """
    Close ``session``, waiting at most ``timeout`` seconds.

    Never raises: a close that times out is cancelled and the session is
    detached from its connector; any other close failure is logged.
    """
    try:
        await asyncio.wait_for(session.close(), timeout=timeout)
    except asyncio.TimeoutError:
        logger.warning(f"HTTP session did not close within {timeout}s, cancelling")
        try:
            session.detach()
        except Exception as e:
            logger.warning(f"Failed to detach HTTP session: {e}")
    except Exception as e:
        logger.warning(f"Error closing HTTP session: {e}")


async def fahrplan_session(
    config: APIConfig,
    body: Callable[[FahrplanAPI], Awaitable[T]],
    client_factory: Optional[ClientFactory] = None,
) -> T:
    """
    Run ``body`` with a freshly created API client.

    The session is closed after ``body`` finishes, also when it raises.
    Close problems are logged and never replace the result of ``body``.

    Args:
        config: API configuration
        body: Coroutine function receiving the API client
        client_factory: Session factory, defaults to ``create_http_client``

    Returns:
        Whatever ``body`` returned
    """
    factory = client_factory or create_http_client
    session = factory(config)
    try:
        return await body(FahrplanAPI(session, config))
    finally:
        await close_session(session, config.close_timeout_seconds)
