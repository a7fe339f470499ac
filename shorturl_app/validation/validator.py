"""
URL validation: a shape check followed by a DNS lookup.

A candidate is accepted only when it looks like a URL *and* its hostname
resolves. The shape check runs first and short-circuits, so malformed input
never reaches the resolver.
"""

import asyncio
import logging
import re
from typing import Awaitable, Callable, List, Optional
from urllib.parse import urlsplit

from shorturl_app.exceptions import DNSLookupFailed, InvalidURLFormat

logger = logging.getLogger(__name__)

Resolver = Callable[[str], Awaitable[List]]

# ASCII only, as in the original. Dotted-quad hosts are checked for shape
# only, so 999.999.999.999 passes here.
URL_PATTERN = re.compile(
    r"(https?://)?"                                        # protocol
    r"((([a-z\d](?:[a-z\d-]*[a-z\d])?)\.)+[a-z]{2,}"       # domain name
    r"|((\d{1,3}\.){3}\d{1,3}))"                           # OR ip (v4) address
    r"(:\d+)?(/[-a-z\d%_.~+]*)*"                           # port and path
    r"(\?[;&a-z\d%_.~+=-]*)?"                              # query string
    r"(#[-a-z\d_]*)?",                                     # fragment locator
    re.IGNORECASE | re.ASCII,
)


async def system_resolver(hostname: str) -> List:
    """Resolve through the operating system resolver (getaddrinfo)."""
    loop = asyncio.get_running_loop()
    return await loop.getaddrinfo(hostname, None)


def matches_url_pattern(candidate: str) -> bool:
    return URL_PATTERN.fullmatch(candidate) is not None


def extract_hostname(candidate: str) -> str:
    """
    Parse the hostname out of a candidate URL.

    Raises:
        InvalidURLFormat: parsing fails or yields no hostname (a candidate
            without a scheme, such as "www.example.com", has none)
    """
    try:
        hostname = urlsplit(candidate).hostname
    except ValueError as e:
        raise InvalidURLFormat(f"Cannot parse {candidate!r}: {e}") from e
    if not hostname:
        raise InvalidURLFormat(f"No hostname in {candidate!r}")
    return hostname


class URLValidator:
    """
    Validates candidate URLs.

    The resolver is injectable so tests can run without network access.
    """

    def __init__(self, resolver: Optional[Resolver] = None):
        self.resolver = resolver or system_resolver

    async def validate(self, candidate: str) -> List:
        """
        Validate a candidate URL.

        Returns:
            The resolver's address info for the hostname (callers do not
            need it beyond knowing the lookup succeeded)

        Raises:
            InvalidURLFormat: pattern mismatch or unparsable URL
            DNSLookupFailed: hostname does not resolve
        """
        if not matches_url_pattern(candidate):
            raise InvalidURLFormat(f"Invalid URL format: {candidate!r}")

        hostname = extract_hostname(candidate)

        try:
            addresses = await self.resolver(hostname)
        except (OSError, UnicodeError) as e:
            logger.info("DNS lookup error for %s: %s", hostname, e)
            raise DNSLookupFailed(f"DNS lookup failed for {hostname}") from e

        if not addresses:
            raise DNSLookupFailed(f"DNS lookup returned no addresses for {hostname}")
        return addresses
