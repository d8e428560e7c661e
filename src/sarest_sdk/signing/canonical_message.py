"""
Canonical request construction for appliance HMAC signatures

The canonical string is the method, the resolved path, the serialized payload
and the HTTP-date, joined by line feeds in that order. The appliance rebuilds
the same string from the received request, so the order and delimiter are
fixed.
"""

from typing import Optional, Union

from ..exceptions import SigningError, SARestErrorCodes
from .types import CanonicalRequest, HttpMethod, CANONICAL_DELIMITER


def _coerce_method(method: Union[str, HttpMethod]) -> HttpMethod:
    if isinstance(method, HttpMethod):
        return method
    try:
        return HttpMethod(method)
    except ValueError:
        raise SigningError(
            f"Unsupported HTTP method for signing: {method!r}",
            SARestErrorCodes.INVALID_METHOD,
            {"method": method, "supported_methods": [m.value for m in HttpMethod]}
        ) from None


def build_canonical_request(
    method: Union[str, HttpMethod],
    path: str,
    payload: Optional[str],
    timestamp: str
) -> CanonicalRequest:
    """
    Build the canonical request for signing.

    Args:
        method: GET or POST
        path: Fully resolved request path, starting with "/"
        payload: Serialized body; None and "" are equivalent
        timestamp: HTTP-date sent alongside the request

    Returns:
        CanonicalRequest: Canonical request value

    Raises:
        SigningError: If any component is invalid
    """
    http_method = _coerce_method(method)

    if not isinstance(path, str) or not path.startswith('/'):
        raise SigningError(
            f"Request path must be an absolute path: {path!r}",
            SARestErrorCodes.INVALID_PATH,
            {"path": path}
        )

    if not isinstance(timestamp, str) or not timestamp:
        raise SigningError(
            "Timestamp cannot be empty",
            SARestErrorCodes.SIGNING_FAILED,
            {"component": "timestamp"}
        )

    if payload is None:
        payload = ""
    elif not isinstance(payload, str):
        raise SigningError(
            f"Payload must be a string or None, got {type(payload).__name__}",
            SARestErrorCodes.SIGNING_FAILED,
            {"component": "payload"}
        )

    # A line feed inside the path or timestamp would shift fields
    for name, value in (('path', path), ('timestamp', timestamp)):
        if CANONICAL_DELIMITER in value:
            raise SigningError(
                f"Canonical component '{name}' contains a line break",
                SARestErrorCodes.SIGNING_FAILED,
                {"component": name}
            )

    return CanonicalRequest(
        method=http_method,
        path=path,
        payload=payload,
        timestamp=timestamp
    )


def build_canonical_string(
    method: Union[str, HttpMethod],
    path: str,
    payload: Optional[str],
    timestamp: str
) -> str:
    """Canonical string for the given components (see build_canonical_request)."""
    return build_canonical_request(method, path, payload, timestamp).text
