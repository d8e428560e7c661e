"""
Application credentials for signed appliance calls

A CredentialContext is created once per client and shared read-only by every
call it signs.
"""

from dataclasses import dataclass, field

from .exceptions import ConfigurationError, SARestErrorCodes


@dataclass(frozen=True)
class CredentialContext:
    """
    Long-lived credentials issued by the appliance for a realm.

    Attributes:
        application_id: Application ID from the configured realm
        application_key: Application Key from the configured realm (secret)
        realm: Realm that enables the REST API, e.g. "secureauth2"
    """
    application_id: str
    application_key: str = field(repr=False)
    realm: str

    def __post_init__(self):
        """Reject missing or blank fields and values unsafe in a header"""
        for name in ('application_id', 'application_key', 'realm'):
            value = getattr(self, name)
            if not isinstance(value, str) or not value.strip():
                raise ConfigurationError(
                    f"Credential field '{name}' must be a non-empty string",
                    SARestErrorCodes.MISSING_CREDENTIAL,
                    {"field": name}
                )

        # Both values are rendered into the Authorization header
        for name in ('application_id', 'realm'):
            value = getattr(self, name)
            if '"' in value or any(ord(ch) < 32 or ord(ch) == 127 for ch in value):
                raise ConfigurationError(
                    f"Credential field '{name}' contains a quote or control character",
                    SARestErrorCodes.INVALID_CONFIG,
                    {"field": name}
                )

    @property
    def key_bytes(self) -> bytes:
        """Application key as the bytes used for HMAC keying"""
        return self.application_key.encode('utf-8')
