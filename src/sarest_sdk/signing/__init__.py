"""
SecureAuth REST Python SDK - Request Signing Module

HMAC-SHA256 request signing for the appliance's REST API. This module builds
canonical requests, signs them with the application key and prepares the
headers the transport sends.
"""

from .types import (
    CanonicalRequest,
    PreparedCall,
    HttpMethod,
    TimestampSource,
    AUTHORIZATION_HEADER,
    AUTHORIZATION_SCHEME,
    CANONICAL_DELIMITER,
    DATE_HEADER,
)

from .utils import (
    generate_timestamp,
    format_http_date,
    parse_http_date,
    fixed_timestamp_source,
    resolve_timestamp,
)

from .canonical_message import (
    build_canonical_request,
    build_canonical_string,
)

from .hmac_signer import (
    HMACSigner,
    sign,
    verify_signature,
    format_authorization_header,
    parse_authorization_header,
)

from .prepare import (
    SignedCallFacade,
    prepare,
)

# Public API exports
__all__ = [
    # Types
    'CanonicalRequest',
    'PreparedCall',
    'HttpMethod',
    'TimestampSource',
    'AUTHORIZATION_HEADER',
    'AUTHORIZATION_SCHEME',
    'CANONICAL_DELIMITER',
    'DATE_HEADER',
    # Utilities
    'generate_timestamp',
    'format_http_date',
    'parse_http_date',
    'fixed_timestamp_source',
    'resolve_timestamp',
    # Canonical request
    'build_canonical_request',
    'build_canonical_string',
    # Signer
    'HMACSigner',
    'sign',
    'verify_signature',
    'format_authorization_header',
    'parse_authorization_header',
    # Facade
    'SignedCallFacade',
    'prepare',
]
