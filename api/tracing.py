"""
HTTP dump helpers

Render requests and responses as raw HTTP text for the trace and error sinks.
Request bodies are never rendered.
"""
from http import HTTPStatus
from typing import Mapping, Optional

import aiohttp
from yarl import URL


def reason_phrase(status: int, reason: Optional[str] = None) -> str:
    """Reason phrase sent by the server, or the standard one for the code."""
    if reason:
        return reason
    try:
        return HTTPStatus(status).phrase
    except ValueError:
        return ""


def dump_request(method: str, url: URL, headers: Mapping[str, str]) -> str:
    """Render a request line and headers, without body."""
    lines = [f"{method} {url.raw_path_qs} HTTP/1.1", f"Host: {url.raw_authority}"]
    lines.extend(f"{k}: {v}" for k, v in headers.items())
    return "\r\n".join(lines) + "\r\n\r\n"


def dump_response(response: aiohttp.ClientResponse, body: bytes) -> str:
    """Render a status line, headers and body."""
    version = response.version
    proto = f"HTTP/{version.major}.{version.minor}" if version else "HTTP/1.1"
    lines = [f"{proto} {response.status} {reason_phrase(response.status, response.reason)}"]
    lines.extend(f"{k}: {v}" for k, v in response.headers.items())
    return "\r\n".join(lines) + "\r\n\r\n" + body.decode("utf-8", errors="replace")
