"""
Error kinds raised by the shortening core.

Routes catch these at the HTTP boundary and answer with fixed JSON
envelopes; the message carried by the exception is only ever logged.
"""


class ShortURLError(Exception):
    """Base class for every error raised by the shortening core."""


class InvalidURL(ShortURLError):
    """The submitted string cannot be shortened."""


class InvalidURLFormat(InvalidURL):
    """Candidate failed the URL pattern or could not be parsed."""


class DNSLookupFailed(InvalidURL):
    """Candidate hostname does not resolve."""


class DuplicateKey(ShortURLError):
    """A record with the same short URL already exists."""


class StoreUnavailable(ShortURLError):
    """The backing store could not be reached or rejected the operation."""


class NotFound(ShortURLError):
    """No record exists for the requested short URL."""
