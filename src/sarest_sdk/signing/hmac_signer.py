"""
HMAC-SHA256 request signer for the appliance's authorization scheme

The signature is the base64-encoded HMAC-SHA256 of the canonical request,
keyed with the application key. Only the derived signature leaves this module;
the key is never logged or rendered.
"""

import base64
import binascii
from typing import Union

# Import cryptography components
try:
    from cryptography.hazmat.primitives import hashes, hmac
    from cryptography.exceptions import InvalidSignature
    CRYPTOGRAPHY_AVAILABLE = True
except ImportError:
    CRYPTOGRAPHY_AVAILABLE = False
    hashes = None
    hmac = None
    InvalidSignature = None

from ..credentials import CredentialContext
from ..exceptions import SigningError, SARestErrorCodes
from .types import AUTHORIZATION_SCHEME, CanonicalRequest
from .utils import to_base64


def _message_bytes(canonical: Union[CanonicalRequest, str, bytes]) -> bytes:
    if isinstance(canonical, CanonicalRequest):
        return canonical.to_bytes()
    if isinstance(canonical, str):
        return canonical.encode('utf-8')
    return canonical


def _new_hmac(key: bytes):
    if not CRYPTOGRAPHY_AVAILABLE:
        raise SigningError(
            "Cryptography package not available for signing",
            SARestErrorCodes.CRYPTOGRAPHY_UNAVAILABLE
        )
    return hmac.HMAC(key, hashes.SHA256())


def _key_bytes(application_key: Union[str, bytes]) -> bytes:
    if isinstance(application_key, str):
        application_key = application_key.encode('utf-8')
    if not application_key:
        raise SigningError(
            "Application key cannot be empty",
            SARestErrorCodes.SIGNING_FAILED
        )
    return application_key


def sign(canonical: Union[CanonicalRequest, str, bytes], application_key: Union[str, bytes]) -> str:
    """
    Sign a canonical request.

    Args:
        canonical: Canonical request (or its rendered text)
        application_key: Application key used as the HMAC secret

    Returns:
        str: Base64-encoded HMAC-SHA256 digest

    Raises:
        SigningError: If the digest can't be computed
    """
    mac = _new_hmac(_key_bytes(application_key))
    try:
        mac.update(_message_bytes(canonical))
        return to_base64(mac.finalize())
    except Exception as e:
        # Don't echo the key or message into the error
        raise SigningError(
            f"Message signing failed: {type(e).__name__}",
            SARestErrorCodes.SIGNING_FAILED
        ) from e


def verify_signature(
    canonical: Union[CanonicalRequest, str, bytes],
    application_key: Union[str, bytes],
    signature: str
) -> bool:
    """
    Check a base64 signature against a canonical request in constant time.

    Returns:
        bool: True if the signature matches
    """
    try:
        expected = base64.b64decode(signature, validate=True)
    except (binascii.Error, ValueError):
        return False

    mac = _new_hmac(_key_bytes(application_key))
    mac.update(_message_bytes(canonical))
    try:
        mac.verify(expected)
    except InvalidSignature:
        return False
    return True


def format_authorization_header(application_id: str, realm: str, signature: str) -> str:
    """
    Render the Authorization header value.

    Format: HMAC-SHA256 application_id="<id>", realm="<realm>", signature="<b64>"
    """
    for name, value in (('application_id', application_id), ('realm', realm), ('signature', signature)):
        if not value or '"' in value or any(ord(ch) < 32 or ord(ch) == 127 for ch in value):
            raise SigningError(
                f"Header field '{name}' is empty or contains a quote or control character",
                SARestErrorCodes.SIGNING_FAILED,
                {"field": name}
            )

    return (
        f'{AUTHORIZATION_SCHEME} '
        f'application_id="{application_id}", '
        f'realm="{realm}", '
        f'signature="{signature}"'
    )


def parse_authorization_header(header: str) -> dict:
    """
    Split an Authorization header produced by format_authorization_header.

    Returns:
        dict: application_id, realm and signature

    Raises:
        SigningError: If the header isn't in the expected format
    """
    prefix = AUTHORIZATION_SCHEME + ' '
    if not header.startswith(prefix):
        raise SigningError(
            "Authorization header does not use the HMAC-SHA256 scheme",
            SARestErrorCodes.SIGNING_FAILED
        )

    fields = {}
    for part in header[len(prefix):].split(', '):
        name, sep, value = part.partition('=')
        if not sep or len(value) < 2 or not (value.startswith('"') and value.endswith('"')):
            raise SigningError(
                f"Malformed authorization header field: {part!r}",
                SARestErrorCodes.SIGNING_FAILED
            )
        fields[name] = value[1:-1]

    if set(fields) != {'application_id', 'realm', 'signature'}:
        raise SigningError(
            "Authorization header must carry application_id, realm and signature",
            SARestErrorCodes.SIGNING_FAILED,
            {"fields": sorted(fields)}
        )
    return fields


class HMACSigner:
    """
    Signer bound to one set of application credentials.

    Holds no mutable state, so one instance can be shared across threads.
    """

    def __init__(self, credentials: CredentialContext):
        if not isinstance(credentials, CredentialContext):
            raise SigningError(
                "Credentials must be a CredentialContext instance",
                SARestErrorCodes.SIGNING_FAILED
            )
        self.credentials = credentials

    def sign_canonical_request(self, canonical: CanonicalRequest) -> str:
        """Signature for the canonical request under this signer's key."""
        return sign(canonical, self.credentials.key_bytes)

    def authorization_header(self, canonical: CanonicalRequest) -> str:
        """Complete Authorization header value for the canonical request."""
        signature = self.sign_canonical_request(canonical)
        return format_authorization_header(
            self.credentials.application_id,
            self.credentials.realm,
            signature
        )

    def __repr__(self) -> str:
        return f"HMACSigner(application_id={self.credentials.application_id!r}, realm={self.credentials.realm!r})"
