"""
Reply Propagation

A sender may ask for some of its headers to be echoed back in the reply by
listing them in the Copy-Headers header, e.g. ``Copy-Headers: Trace, Tenant``.
This module computes which headers of an original envelope a reply inherits.
"""

from messenger.protocol.envelope import Envelope
from messenger.protocol.headers import COPY_HEADERS_SEPARATOR, DefinedHeader


def requested_copy_headers(original: Envelope) -> list[str]:
    """Header names listed in the Copy-Headers header of ``original``, in order."""
    raw = original.header(DefinedHeader.COPY_HEADERS)
    if not raw:
        return []
    return [name for name in raw.split(COPY_HEADERS_SEPARATOR) if name]


def copy_headers_keys_and_values(original: Envelope) -> dict[str, str]:
    """
    Return the headers of ``original`` that must be copied into a reply.

    Requested names that ``original`` does not carry are left out silently.
    """
    return {
        name: original.headers[name]
        for name in requested_copy_headers(original)
        if name in original.headers
    }
