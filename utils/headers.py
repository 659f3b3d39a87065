"""
Credential extraction from Authorization-style header values.

Both extractors share one contract: the header must be present and non-empty,
start with the exact prefix, and leave a non-empty value once trimmed.
"""
from __future__ import annotations

from typing import Optional

from utils.exceptions import MalformedCredential, MissingCredential

BEARER_PREFIX = "Bearer "
API_KEY_PREFIX = "ApiKey "


def _extract_credential(header_value: Optional[str], prefix: str) -> str:
    if not header_value:
        raise MissingCredential("authorization header is missing")
    if not header_value.startswith(prefix):
        raise MalformedCredential(f"authorization header must start with {prefix!r}")
    credential = header_value[len(prefix):].strip()
    if not credential:
        raise MalformedCredential("authorization header carries an empty credential")
    return credential


def get_bearer_token(header_value: Optional[str]) -> str:
    """Return the token from a 'Bearer <token>' header value."""
    return _extract_credential(header_value, BEARER_PREFIX)


def get_api_key(header_value: Optional[str]) -> str:
    """Return the key from an 'ApiKey <key>' header value."""
    return _extract_credential(header_value, API_KEY_PREFIX)
