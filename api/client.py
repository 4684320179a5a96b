"""
API client for the Pandorabots service

aiohttp-based client for bot management, personality files and talk.
Every operation funnels through one request path that authenticates the
URL, checks the status code and decodes the body.
"""
import asyncio
import logging
import os
import re
from contextlib import asynccontextmanager
from typing import AsyncIterator, BinaryIO, Dict, List, Optional, Type, TypeVar, Union
from urllib.parse import urlsplit

import aiohttp
from pydantic import TypeAdapter, ValidationError
from yarl import URL

from api.tracing import dump_request, dump_response, reason_phrase
from config import DEFAULT_URL
from exceptions import (
    DecodeError,
    InvalidURL,
    MissingCredentials,
    TransportFailure,
    UnexpectedStatus,
    UnsupportedFileExtension,
)
from models import BotEntry, BotFiles, Reply, TalkOptions

logger = logging.getLogger(f'{__name__}.PandorabotsClient')

__version__ = "1.0.0"

BOT = "bot"
TALK = "talk"

CHUNK_SIZE = 64 * 1024

T = TypeVar('T')

RequestBody = Union[bytes, BinaryIO]

_BOT_LIST = TypeAdapter(List[BotEntry])

# Host names, IPv4 and (unbracketed) IPv6 literals
_HOST_RE = re.compile(r"^[a-z0-9._~%!$&'()*+,;=:-]+$")


class PandorabotsClient:
    """
    Async HTTP client for the Pandorabots API.

    The configuration (credentials, base URL, sinks) is fixed at construction.
    Use api.options.new_client() to build one from option functions.

    Features:
    - user_key query authentication on every request
    - Uniform UnexpectedStatus error for non-2xx answers
    - JSON decoding into immutable models, or raw streaming into a sink
    - Optional error and trace sinks (plain logging.Logger objects)
    """

    def __init__(
        self,
        app_id: str,
        user_key: str,
        url: str = "",
        session: Optional[aiohttp.ClientSession] = None,
        error_log: Optional[logging.Logger] = None,
        trace_log: Optional[logging.Logger] = None
    ):
        """
        Initialize the client.

        Args:
            app_id: Application ID as received from Pandorabots
            user_key: User key as received from Pandorabots
            url: Base URL of the service, DEFAULT_URL when empty
            session: aiohttp session to send requests with. When omitted the
                client creates (and closes) its own.
            error_log: Logger receiving failed responses
            trace_log: Logger receiving every request and response

        Raises:
            MissingCredentials: If app_id or user_key is empty
            InvalidURL: If url does not parse or is not http/https
        """
        self._error_log = error_log
        self._trace_log = trace_log

        if not app_id or not user_key:
            error = MissingCredentials()
            self._errorf(str(error))
            raise error

        raw_url = url or DEFAULT_URL
        try:
            parts = urlsplit(raw_url)
            parts.port  # raises for a non-numeric or out-of-range port
        except ValueError as e:
            self._errorf(f"Invalid URL [{raw_url}] - {e}")
            raise InvalidURL(raw_url, f"Invalid URL [{raw_url}] - {e}") from e
        if parts.scheme not in ("http", "https"):
            error = InvalidURL(raw_url)
            self._errorf(str(error))
            raise error
        if not parts.hostname or not _HOST_RE.match(parts.hostname):
            message = f"Invalid URL [{raw_url}] - invalid host"
            self._errorf(message)
            raise InvalidURL(raw_url, message)
        if raw_url.endswith("/"):
            raw_url = raw_url[:-1]

        self._app_id = app_id
        self._user_key = user_key
        self._url = raw_url
        self._session = session
        self._owns_session = session is None

        self._tracef(f"Using URL [{self._url}]")
        logger.debug(f"PandorabotsClient initialized with url: {self._url}")

    @property
    def app_id(self) -> str:
        return self._app_id

    @property
    def url(self) -> str:
        """Effective base URL, without trailing slash."""
        return self._url

    @property
    def headers(self) -> Dict[str, str]:
        """Headers sent with every request."""
        return {'User-Agent': f'pb-client/{__version__}'}

    def _errorf(self, message: str) -> None:
        if self._error_log is not None:
            self._error_log.error(message)

    def _tracef(self, message: str) -> None:
        if self._trace_log is not None:
            self._trace_log.debug(message)

    # URL construction

    def app_url(self, action: str) -> str:
        """URL of an application-scoped resource: {base}/{action}/{appId}."""
        return f"{self._url}/{action}/{self._app_id}"

    def bot_url(self, action: str, bot_name: str) -> str:
        """URL of a bot-scoped resource: {base}/{action}/{appId}/{botName}."""
        return f"{self.app_url(action)}/{bot_name}"

    def file_to_url(self, bot_name: str, filename: str) -> str:
        """
        Resolve the URL of a personality file from its extension.

        Args:
            bot_name: Bot owning the file
            filename: File name, e.g. 'rules.aiml' or 'colors.set'

        Returns:
            URL of the file resource

        Raises:
            UnsupportedFileExtension: For any other extension
        """
        url = self.bot_url(BOT, bot_name)
        stem, dot, ext = filename.rpartition(".")
        extension = dot + ext if dot else ""
        if extension == ".aiml":
            return f"{url}/file/{filename}"
        if extension in (".set", ".map", ".substitution"):
            return f"{url}/{ext}/{stem}"
        if extension in (".properties", ".pdefaults"):
            # Singleton resources, one per bot
            return f"{url}/{ext}"
        raise UnsupportedFileExtension(filename, extension)

    # Request handling

    async def _ensure_session(self) -> aiohttp.ClientSession:
        """Ensure an aiohttp session exists and is not closed."""
        if self._session is None or (self._owns_session and self._session.closed):
            connector = aiohttp.TCPConnector(
                limit=100,  # Total connection pool size
                ttl_dns_cache=300,
                use_dns_cache=True
            )

            # No total timeout, zipped bots and large AIML uploads can take a while
            timeout = aiohttp.ClientTimeout(total=None, connect=10, sock_read=60)

            self._session = aiohttp.ClientSession(connector=connector, timeout=timeout)
            self._owns_session = True

            logger.debug("Created new aiohttp session")
        return self._session

    async def _handle_error(self, response: aiohttp.ClientResponse) -> None:
        """Raise UnexpectedStatus for any status outside [200, 300)."""
        if 200 <= response.status < 300:
            return
        if self._error_log is not None:
            body = await response.read()
            self._errorf(dump_response(response, body))
        error = UnexpectedStatus(response.status, reason_phrase(response.status, response.reason))
        self._errorf(str(error))
        logger.debug(f"{response.method} {response.url.path} failed: {error}")
        raise error

    @asynccontextmanager
    async def _request(
        self,
        method: str,
        url: str,
        params: Optional[Dict[str, str]] = None,
        data: Optional[RequestBody] = None
    ) -> AsyncIterator[aiohttp.ClientResponse]:
        """
        Send one authenticated request and yield the successful response.

        Args:
            method: HTTP method
            url: Target URL without query string
            params: Operation query parameters, merged after user_key
            data: Optional body, bytes or a binary file object (streamed)

        Yields:
            Response with a 2xx status, released on exit

        Raises:
            TransportFailure: If the exchange could not complete
            UnexpectedStatus: For non-2xx answers
        """
        query = {'user_key': self._user_key}
        query.update(params or {})

        session = await self._ensure_session()
        headers = self.headers

        if self._trace_log is not None:
            self._tracef(dump_request(method, URL(url).with_query(query), headers))
        logger.debug(f"{method}: {url} params: {sorted(params or {})}")

        try:
            async with session.request(method, url, params=query, data=data, headers=headers) as response:
                await self._handle_error(response)
                yield response
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error(f"HTTP client error for {method} {url}: {e}")
            raise TransportFailure(f"Network error: {e}") from e

    async def _trace_response(self, response: aiohttp.ClientResponse) -> Optional[bytes]:
        """Mirror a successful response to the trace sink, returning the body read."""
        if self._trace_log is None:
            return None
        body = await response.read()
        self._tracef(dump_response(response, body))
        return body

    async def _execute(
        self,
        method: str,
        url: str,
        params: Optional[Dict[str, str]] = None,
        data: Optional[RequestBody] = None
    ) -> None:
        """Run a request whose response carries no result."""
        async with self._request(method, url, params, data) as response:
            await self._trace_response(response)

    async def _fetch(
        self,
        method: str,
        url: str,
        result_type: Union[Type[T], TypeAdapter],
        params: Optional[Dict[str, str]] = None
    ) -> T:
        """Run a request and decode its JSON body into result_type."""
        adapter = result_type if isinstance(result_type, TypeAdapter) else TypeAdapter(result_type)
        async with self._request(method, url, params) as response:
            body = await self._trace_response(response)
            if body is None:
                body = await response.read()
            try:
                return adapter.validate_json(body)
            except ValidationError as e:
                logger.error(f"Could not decode response of {method} {url}: {e}")
                raise DecodeError(f"Invalid response body: {e}") from e

    async def _download(
        self,
        method: str,
        url: str,
        sink: BinaryIO,
        params: Optional[Dict[str, str]] = None
    ) -> None:
        """Run a request and copy its body verbatim into sink."""
        async with self._request(method, url, params) as response:
            body = await self._trace_response(response)
            if body is not None:
                sink.write(body)
                return
            async for chunk in response.content.iter_chunked(CHUNK_SIZE):
                sink.write(chunk)

    # Bots

    async def list_bots(self) -> List[BotEntry]:
        """List the bots of the application."""
        return await self._fetch("GET", self.app_url(BOT), _BOT_LIST)

    async def create_bot(self, bot_name: str) -> None:
        """Create an empty bot."""
        await self._execute("PUT", self.bot_url(BOT, bot_name))

    async def delete_bot(self, bot_name: str) -> None:
        """Delete a bot with all of its files."""
        await self._execute("DELETE", self.bot_url(BOT, bot_name))

    async def verify(self, bot_name: str) -> None:
        """Compile the bot; a compilation error surfaces as UnexpectedStatus."""
        await self._execute("GET", self.bot_url(BOT, bot_name) + "/verify")

    # Files

    async def list_files(self, bot_name: str) -> BotFiles:
        """List the personality files of a bot."""
        return await self._fetch("GET", self.bot_url(BOT, bot_name), BotFiles)

    async def download_files(self, bot_name: str, sink: BinaryIO) -> None:
        """Write all files of a bot, zipped, into sink."""
        await self._download("GET", self.bot_url(BOT, bot_name), sink, {'return': 'zip'})

    async def download_files_to_path(self, bot_name: str, path: Union[str, os.PathLike]) -> None:
        """Write all files of a bot, zipped, into a new file at path."""
        with open(path, 'wb') as f:
            await self.download_files(bot_name, f)

    async def upload_file(self, bot_name: str, filename: str, data: RequestBody) -> None:
        """
        Upload a personality file, replacing any previous version.

        Args:
            bot_name: Target bot
            filename: File name, its extension selects the file kind
            data: File content, bytes or a binary file object
        """
        await self._execute("PUT", self.file_to_url(bot_name, filename), data=data)

    async def upload_file_from_path(self, bot_name: str, path: Union[str, os.PathLike]) -> None:
        """Upload the local file at path under its base name."""
        url = self.file_to_url(bot_name, os.path.basename(path))
        with open(path, 'rb') as f:
            await self._execute("PUT", url, data=f)

    async def delete_file(self, bot_name: str, filename: str) -> None:
        """Delete a personality file."""
        await self._execute("DELETE", self.file_to_url(bot_name, filename))

    async def get_file(self, bot_name: str, filename: str, sink: BinaryIO) -> None:
        """Write the content of a personality file into sink."""
        await self._download("GET", self.file_to_url(bot_name, filename), sink)

    async def get_file_to_path(self, bot_name: str, path: Union[str, os.PathLike]) -> None:
        """Download the file named like path's base name into path."""
        url = self.file_to_url(bot_name, os.path.basename(path))
        with open(path, 'wb') as f:
            await self._download("GET", url, f)

    # Talk

    async def talk(
        self,
        bot_name: str,
        input_text: str,
        client_name: str = "",
        session_id: int = 0,
        recent: bool = False
    ) -> Reply:
        """
        Run one conversational turn.

        Pass the session_id of the previous Reply to continue a conversation,
        0 starts a new one.
        """
        options = TalkOptions(client_name=client_name, session_id=session_id, recent=recent)
        return await self.talk_debug(bot_name, input_text, options)

    async def talk_debug(
        self,
        bot_name: str,
        input_text: str,
        options: Optional[TalkOptions] = None
    ) -> Reply:
        """Run one conversational turn with context overrides and debug flags."""
        params = (options or TalkOptions()).to_params(input_text)
        return await self._fetch("POST", self.bot_url(TALK, bot_name), Reply, params)

    async def close(self) -> None:
        """Close the HTTP session if the client created it."""
        if self._owns_session and self._session and not self._session.closed:
            await self._session.close()
            logger.debug("Closed aiohttp session")

    async def __aenter__(self):
        """Async context manager entry."""
        await self._ensure_session()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit with cleanup."""
        await self.close()

    def __repr__(self):
        return f"{self.__class__.__name__}(app_id={self._app_id!r}, url={self._url!r})"
