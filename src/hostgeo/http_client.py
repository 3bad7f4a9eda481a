"""Shared HTTP client utilities for hostgeo."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, Optional

import httpx

from . import __version__
from .config import AppSettings

USER_AGENT = f"hostgeo/{__version__}"


def build_timeout(app_settings: Optional[AppSettings] = None) -> httpx.Timeout:
    """Timeout for database downloads: a bounded connect and a per-read budget."""
    app_settings = app_settings or AppSettings()
    return httpx.Timeout(app_settings.DOWNLOAD_TIMEOUT, connect=app_settings.CONNECT_TIMEOUT)


@contextmanager
def get_client(
    transport: Optional[httpx.BaseTransport] = None,
    timeout: Optional[httpx.Timeout] = None,
) -> Iterator[httpx.Client]:
    """Yield a configured blocking Client with sane defaults.

    The client follows redirects (raw GitHub content is often served through
    one) and sends a deterministic user agent.
    """
    with httpx.Client(
        timeout=timeout or build_timeout(),
        headers={"accept": "*/*", "user-agent": USER_AGENT},
        follow_redirects=True,
        transport=transport,
    ) as client:
        yield client
