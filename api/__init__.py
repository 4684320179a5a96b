"""
API client layer for the Pandorabots service

HTTP client for bot management, personality files and talk.
"""
from .client import PandorabotsClient
from .options import (
    ClientBuilder,
    new_client,
    open_client,
    set_credentials,
    set_error_log,
    set_session,
    set_trace_log,
    set_url,
    settings_options,
)

__all__ = [
    'PandorabotsClient',
    'ClientBuilder',
    'new_client',
    'open_client',
    'set_credentials',
    'set_error_log',
    'set_session',
    'set_trace_log',
    'set_url',
    'settings_options',
]
