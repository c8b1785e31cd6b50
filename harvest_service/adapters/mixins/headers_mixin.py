# harvest_service/adapters/mixins/headers_mixin.py
"""Mixin for generating browser-like HTTP headers."""

from typing import Optional

from ..constants import (
    CHROME_SEC_CH_UA,
    CHROME_USER_AGENT,
    DEFAULT_BROWSER_HEADERS,
)


class BrowserHeadersMixin:
    """
    Builds the fixed header set sent with every race page request. The site
    serves a stripped page to clients that do not look like a browser.
    """

    base_url: str

    def _get_browser_headers(
        self,
        referer: Optional[str] = None,
        *,
        include_sec_ch: bool = True,
    ) -> dict:
        headers = {
            **DEFAULT_BROWSER_HEADERS,
            "User-Agent": CHROME_USER_AGENT,
            "Referer": referer or f"{self.base_url.rstrip('/')}/",
        }

        if include_sec_ch:
            headers.update({
                "sec-ch-ua": CHROME_SEC_CH_UA,
                "sec-ch-ua-mobile": "?0",
                "sec-ch-ua-platform": '"Windows"',
            })

        return headers
