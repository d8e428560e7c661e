"""
Type definitions for request signing functionality

This module holds the wire constants of the appliance's HMAC authorization
scheme and the value types passed between the canonical request builder, the
signer and the signing facade.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Callable, Dict, Tuple

# Wire contract shared with the appliance. Changing any of these breaks
# verification on every deployed appliance.
AUTHORIZATION_HEADER = "Authorization"
DATE_HEADER = "X-SA-Date"
AUTHORIZATION_SCHEME = "HMAC-SHA256"
CANONICAL_DELIMITER = "\n"
CONTENT_TYPE = "application/json"


class HttpMethod(str, Enum):
    """HTTP methods used by the appliance's REST API"""
    GET = "GET"
    POST = "POST"


@dataclass(frozen=True)
class CanonicalRequest:
    """
    Canonical form of a request, exactly as it is signed

    Attributes:
        method: HTTP method
        path: Fully resolved request path
        payload: Serialized request body ("" for bodiless calls)
        timestamp: HTTP-date also sent in the date header
    """
    method: HttpMethod
    path: str
    payload: str
    timestamp: str

    @property
    def text(self) -> str:
        """The canonical string: method, path, payload and timestamp on separate lines"""
        return CANONICAL_DELIMITER.join((self.method.value, self.path, self.payload, self.timestamp))

    def to_bytes(self) -> bytes:
        return self.text.encode('utf-8')


@dataclass(frozen=True)
class PreparedCall:
    """
    A signed call ready for the transport layer

    Attributes:
        authorization: Authorization header value
        date: Date header value, identical to the signed timestamp
        method: HTTP method
        path: Resolved request path (append to the appliance base URL)
        body: Serialized body ("" for bodiless calls)
        canonical: Canonical request that was signed
    """
    authorization: str
    date: str
    method: HttpMethod
    path: str
    body: str
    canonical: CanonicalRequest

    def headers(self) -> Dict[str, str]:
        """Headers the transport must send with this call"""
        headers = {
            AUTHORIZATION_HEADER: self.authorization,
            DATE_HEADER: self.date,
            'Accept': CONTENT_TYPE,
        }
        if self.body:
            headers['Content-Type'] = CONTENT_TYPE
        return headers

    def body_bytes(self) -> bytes:
        return self.body.encode('utf-8')

    def as_tuple(self) -> Tuple[str, str, str]:
        """(header, path, body) triple for callers that only need those."""
        return self.authorization, self.path, self.body


# Type aliases for convenience
TimestampSource = Callable[[], datetime]
