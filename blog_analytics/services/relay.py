"""Relay fetcher.

Public blog feeds are fetched through third-party relay endpoints. Relays
are tried in order until one answers with a success status.
"""

import logging
import time
from typing import Optional, Sequence
from urllib.parse import quote

import anyio
import httpx

from blog_analytics.config import DEFAULT_RELAYS
from blog_analytics.exceptions import CONNECTIVITY_HINT, RelayExhausted


logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 20.0


def cache_bust(url: str) -> str:
    """Append a millisecond timestamp so relays never serve a cached error."""
    separator = "&" if "?" in url else "?"
    return f"{url}{separator}_t={int(time.time() * 1000)}"


def build_relay_url(relay: str, target_url: str) -> str:
    """Embed the percent-encoded target URL in a relay template."""
    return relay + quote(target_url, safe="!~*'()")


async def fetch_via_relay(
    target_url: str,
    relays: Sequence[str] = DEFAULT_RELAYS,
    timeout: float = DEFAULT_TIMEOUT,
) -> httpx.Response:
    """Fetch a URL through the first relay that succeeds.

    Args:
        target_url: URL to fetch
        relays: Relay templates, most reliable first
        timeout: Seconds allowed for each attempt

    Returns:
        The successful response, unmodified

    Raises:
        RelayExhausted: If every relay failed or timed out
    """
    busted_target = cache_bust(target_url)
    last_error: Optional[BaseException] = None

    async with httpx.AsyncClient(
        follow_redirects=True,
        timeout=timeout,
        headers={"User-Agent": "BlogAnalytics/1.0 (Feed Analyzer)"},
    ) as client:
        for relay in relays:
            relay_url = build_relay_url(relay, busted_target)
            logger.debug(f"Attempting fetch via {relay}")

            try:
                with anyio.fail_after(timeout):
                    response = await client.get(relay_url)
            except TimeoutError as e:
                logger.warning(f"Relay {relay} timed out after {timeout}s")
                last_error = e
                continue
            except httpx.HTTPError as e:
                logger.warning(f"Relay {relay} failed: {e}")
                last_error = e
                continue

            if response.is_success:
                return response

            logger.warning(f"Relay {relay} returned status {response.status_code}")
            last_error = httpx.HTTPStatusError(
                f"Relay returned status {response.status_code}",
                request=response.request,
                response=response,
            )

    if last_error is None:
        message = f"All relays failed. {CONNECTIVITY_HINT}"
    else:
        message = f"All relays failed ({last_error}). {CONNECTIVITY_HINT}"

    raise RelayExhausted(message, last_error=last_error)
