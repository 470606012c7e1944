#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Property page fetcher used by the remote classification fallback.

When a notification carries no usable category signal, the listing page
linked from it usually does. The fetch is a single GET; any failure means
"no additional signal" and is never raised to the caller.
"""

import logging
from contextlib import contextmanager
from typing import Dict, Iterator, Optional

import requests

from greenacres_bridge.config import AppConfig, config as default_config
from greenacres_bridge.extraction.normalizer import strip_markup
from greenacres_bridge.utils.logger import get_logger, log_integration_event

logger = get_logger(__name__)


class PropertyPageFetcher:
    """Fetches a listing page and returns its visible text."""

    def __init__(
        self,
        config: Optional[AppConfig] = None,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize the fetcher.

        Args:
            config: Application configuration object
            session: Optional requests session, mainly for tests. Without
                one every fetch opens and closes its own session
        """
        self.config = config or default_config
        self.session = session
        self.headers: Dict[str, str] = {"User-Agent": self.config.property_page_user_agent}
        self.timeout = self.config.property_page_timeout_seconds

    @contextmanager
    def _open_session(self) -> Iterator[requests.Session]:
        # The fetcher is shared by the webhook worker threads
        if self.session is not None:
            yield self.session
            return
        with requests.Session() as session:
            yield session

    def fetch_text(self, url: str) -> Optional[str]:
        """
        Download a property page and strip its markup.

        Args:
            url: Listing URL taken from the notification

        Returns:
            Optional[str]: Visible page text, or None when the page could not
            be retrieved
        """
        log_integration_event("property_page", "fetch", f"Fetching {url}", logging.DEBUG)

        try:
            with self._open_session() as session:
                response = session.get(
                    url, headers=self.headers, timeout=self.timeout, allow_redirects=True
                )
        except requests.RequestException as e:
            log_integration_event(
                "property_page", "error", f"Failed to fetch {url}: {str(e)}", logging.WARNING
            )
            return None

        if not response.ok:
            log_integration_event(
                "property_page",
                "error",
                f"{url} returned HTTP {response.status_code}",
                logging.WARNING,
            )
            return None

        return strip_markup(response.text)
