"""
Client construction from option functions

Options are applied in order to a mutable ClientBuilder, later options
override earlier ones. new_client() then builds the immutable client.

Usage:
    client = new_client(
        set_error_log(logging.getLogger('pb.errors')),
        set_credentials(app_id, user_key))
"""
import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import AsyncIterator, Callable, List, Optional

import aiohttp

from api.client import PandorabotsClient
from config import ClientSettings


@dataclass
class ClientBuilder:
    """Mutable configuration collected before the client is built."""

    app_id: str = ""
    user_key: str = ""
    url: str = ""
    session: Optional[aiohttp.ClientSession] = None
    error_log: Optional[logging.Logger] = None
    trace_log: Optional[logging.Logger] = None

    def build(self) -> PandorabotsClient:
        """
        Build the client.

        Raises:
            MissingCredentials: If app_id or user_key is empty
            InvalidURL: If url does not parse or is not http/https
        """
        return PandorabotsClient(
            app_id=self.app_id,
            user_key=self.user_key,
            url=self.url,
            session=self.session,
            error_log=self.error_log,
            trace_log=self.trace_log
        )


OptionFunc = Callable[[ClientBuilder], None]


def set_credentials(app_id: str, user_key: str) -> OptionFunc:
    """Set the application ID and user key."""
    def option(builder: ClientBuilder) -> None:
        builder.app_id, builder.user_key = app_id, user_key
    return option


def set_url(url: str) -> OptionFunc:
    """Set the service base URL; empty means DEFAULT_URL."""
    def option(builder: ClientBuilder) -> None:
        builder.url = url
    return option


def set_session(session: Optional[aiohttp.ClientSession]) -> OptionFunc:
    """Send requests with session instead of a client-owned one."""
    def option(builder: ClientBuilder) -> None:
        builder.session = session
    return option


def set_error_log(error_log: Optional[logging.Logger]) -> OptionFunc:
    """Set the logger for failed responses and configuration errors."""
    def option(builder: ClientBuilder) -> None:
        builder.error_log = error_log
    return option


def set_trace_log(trace_log: Optional[logging.Logger]) -> OptionFunc:
    """Set the logger mirroring every request and response."""
    def option(builder: ClientBuilder) -> None:
        builder.trace_log = trace_log
    return option


def settings_options(settings: ClientSettings) -> List[OptionFunc]:
    """Options carrying the credentials and URL of settings."""
    return [
        set_credentials(settings.app_id, settings.user_key),
        set_url(settings.url),
    ]


def new_client(*options: OptionFunc) -> PandorabotsClient:
    """Apply options in order and build a client."""
    builder = ClientBuilder()
    for option in options:
        option(builder)
    return builder.build()


@asynccontextmanager
async def open_client(*options: OptionFunc) -> AsyncIterator[PandorabotsClient]:
    """
    Build a client as async context manager, closing it on exit.

    Usage:
        async with open_client(set_credentials(app_id, user_key)) as client:
            bots = await client.list_bots()
    """
    client = new_client(*options)
    try:
        yield client
    finally:
        await client.close()
