"""
HTTP client for SecureAuth appliance communication

This module provides the transport for signed calls: it builds the appliance
base URL from host, port and SSL settings, sends calls prepared by the signing
facade and maps responses to result records.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

# HTTP client imports with fallback
try:
    import requests
    from requests.adapters import HTTPAdapter
    from urllib3.util.retry import Retry
    REQUESTS_AVAILABLE = True
except ImportError:
    REQUESTS_AVAILABLE = False
    requests = None
    HTTPAdapter = None
    Retry = None

from .credentials import CredentialContext
from .exceptions import (
    ApplianceCommunicationError,
    ApplianceResponseError,
    ConfigurationError,
    SARestErrorCodes,
)
from .models import FactorsResponse, IPEval, ResponseObject
from .operations import (
    DeliverByCall,
    DeliverByEmail,
    DeliverByHelpDesk,
    DeliverByPush,
    DeliverBySms,
    FactorsQuery,
    IPRiskRequest,
    SignableOperation,
    ValidateKba,
    ValidateOath,
    ValidatePassword,
    ValidateUserId,
)
from .signing.prepare import SignedCallFacade
from .signing.types import PreparedCall, TimestampSource
from .version import __version__

logger = logging.getLogger(__name__)

USER_AGENT = f"SARest-Python-SDK/{__version__}"


@dataclass
class ApplianceConfig:
    """Configuration for the appliance connection."""
    host: str
    port: int = 443
    ssl: bool = True
    timeout: float = 30.0
    verify_ssl: bool = True
    retry_attempts: int = 3
    retry_backoff_factor: float = 0.3

    def __post_init__(self):
        """Validate appliance configuration."""
        if not self.host or not isinstance(self.host, str):
            raise ConfigurationError("Appliance host cannot be empty")

        if '://' in self.host or '/' in self.host:
            raise ConfigurationError(
                f"Appliance host must be a bare hostname: {self.host}",
                details={"host": self.host}
            )

        try:
            self.port = int(self.port)
        except (TypeError, ValueError):
            raise ConfigurationError(f"Invalid appliance port: {self.port!r}") from None

        if not 0 < self.port < 65536:
            raise ConfigurationError(f"Appliance port out of range: {self.port}")

        if self.timeout <= 0:
            raise ConfigurationError("Timeout must be positive")

        if self.retry_attempts < 0:
            raise ConfigurationError("Retry attempts must be non-negative")

    @property
    def base_url(self) -> str:
        scheme = 'https' if self.ssl else 'http'
        return f"{scheme}://{self.host}:{self.port}"


class SARestClient:
    """
    HTTP client for the SecureAuth REST API.

    Provides one method per appliance operation. Every call is signed by the
    signing facade right before it is sent; responses are mapped to result
    records. A negative answer from the appliance (unknown user, wrong
    password) comes back as a result record, never as None.
    """

    def __init__(
        self,
        config: ApplianceConfig,
        credentials: CredentialContext,
        timestamp_source: Optional[TimestampSource] = None,
        session: Optional[Any] = None
    ):
        """
        Initialize the HTTP client.

        Args:
            config: Appliance connection settings
            credentials: Application credentials for the realm
            timestamp_source: Optional clock override for signing
            session: Optional preconfigured requests session
        """
        if not REQUESTS_AVAILABLE:
            raise ApplianceCommunicationError(
                "HTTP client requires 'requests' package. Install with: pip install requests"
            )

        self.config = config
        self.credentials = credentials
        self.facade = SignedCallFacade(credentials, timestamp_source)
        self.session = session or self._create_session()

        logger.info(f"Initialized SecureAuth REST client for {config.base_url} (realm: {credentials.realm})")

    def _create_session(self):
        """Create HTTP session with retry logic."""
        session = requests.Session()

        # POSTs are never resent after reaching the appliance; connect
        # failures are retried for every method.
        retry_strategy = Retry(
            total=self.config.retry_attempts,
            status_forcelist=[429, 500, 502, 503, 504],
            allowed_methods=["GET"],
            backoff_factor=self.config.retry_backoff_factor,
            raise_on_status=False,
        )

        adapter = HTTPAdapter(max_retries=retry_strategy)
        session.mount("http://", adapter)
        session.mount("https://", adapter)

        session.headers.update({'User-Agent': USER_AGENT})
        return session

    def _send(self, prepared: PreparedCall) -> Dict[str, Any]:
        """
        Send a prepared call.

        Args:
            prepared: Signed call from the facade

        Returns:
            dict: Decoded JSON response

        Raises:
            ApplianceCommunicationError: If the appliance can't be reached
            ApplianceResponseError: On HTTP error status or unreadable body
        """
        url = self.config.base_url + prepared.path

        try:
            logger.debug(f"Making {prepared.method.value} request to {url}")
            response = self.session.request(
                prepared.method.value,
                url,
                data=prepared.body_bytes() if prepared.body else None,
                headers=prepared.headers(),
                timeout=self.config.timeout,
                verify=self.config.verify_ssl,
            )
        except requests.exceptions.Timeout as e:
            raise ApplianceCommunicationError(
                f"Request timeout after {self.config.timeout} seconds",
                SARestErrorCodes.TIMEOUT,
                {"url": url}
            ) from e
        except requests.exceptions.ConnectionError as e:
            raise ApplianceCommunicationError(
                f"Connection error: {e}",
                SARestErrorCodes.CONNECTION_ERROR,
                {"url": url}
            ) from e
        except requests.exceptions.RequestException as e:
            raise ApplianceCommunicationError(
                f"Request failed: {e}",
                SARestErrorCodes.CONNECTION_ERROR,
                {"url": url}
            ) from e

        if not response.ok:
            message = f"HTTP {response.status_code}: {response.reason}"
            try:
                error_data = response.json()
                if isinstance(error_data, dict) and error_data.get('message'):
                    message = f"HTTP {response.status_code}: {error_data['message']}"
            except ValueError:
                pass

            raise ApplianceResponseError(
                f"Appliance request failed: {message}",
                SARestErrorCodes.HTTP_ERROR,
                http_status=response.status_code,
                details={"url": url}
            )

        try:
            data = response.json()
        except ValueError as e:
            raise ApplianceResponseError(
                f"Invalid JSON response: {e}",
                SARestErrorCodes.INVALID_RESPONSE,
                http_status=response.status_code,
                details={"url": url}
            ) from e

        if not isinstance(data, dict):
            raise ApplianceResponseError(
                "Appliance response is not a JSON object",
                SARestErrorCodes.INVALID_RESPONSE,
                http_status=response.status_code,
                details={"url": url}
            )
        return data

    def _map(self, record_type, data: Dict[str, Any]):
        try:
            return record_type.from_dict(data)
        except (KeyError, TypeError, ValueError) as e:
            raise ApplianceResponseError(
                f"Unexpected {record_type.__name__} response: {e}",
                SARestErrorCodes.INVALID_RESPONSE,
                details={"status": data.get('status')}
            ) from e

    def execute(self, operation: SignableOperation):
        """
        Sign and send any operation.

        Returns:
            IPEval for IP risk requests, FactorsResponse for factor queries,
            ResponseObject otherwise
        """
        prepared = self.facade.prepare(operation)
        data = self._send(prepared)

        if isinstance(operation, IPRiskRequest):
            result = self._map(IPEval, data)
        elif isinstance(operation, FactorsQuery):
            result = self._map(FactorsResponse, data)
        else:
            result = self._map(ResponseObject, data)

        logger.debug(f"{operation.type_name} call returned status: {result.status}")
        return result

    def ip_evaluation(self, user_id: str, ip_address: str) -> IPEval:
        """IP risk evaluation for a user's access attempt."""
        return self.execute(IPRiskRequest(user_id=user_id, ip_address=ip_address))

    def factors_by_user(self, user_id: str) -> FactorsResponse:
        """Second factors available for the user."""
        return self.execute(FactorsQuery(user_id=user_id))

    def validate_user(self, user_id: str) -> ResponseObject:
        """Check that the user exists in the appliance's datastore."""
        return self.execute(ValidateUserId(user_id=user_id))

    def validate_user_password(self, user_id: str, password: str) -> ResponseObject:
        return self.execute(ValidatePassword(user_id=user_id, token=password))

    def validate_kba(self, user_id: str, answer: str, factor_id: str) -> ResponseObject:
        """Validate the user's answer to the KB question identified by factor_id."""
        return self.execute(ValidateKba(user_id=user_id, token=answer, factor_id=factor_id))

    def validate_oath(self, user_id: str, otp: str, factor_id: str) -> ResponseObject:
        """Validate an OATH one-time passcode from the device identified by factor_id."""
        return self.execute(ValidateOath(user_id=user_id, token=otp, factor_id=factor_id))

    def deliver_otp_by_phone(self, user_id: str, factor_id: str) -> ResponseObject:
        return self.execute(DeliverByCall(user_id=user_id, factor_id=factor_id))

    def deliver_otp_by_sms(self, user_id: str, factor_id: str) -> ResponseObject:
        return self.execute(DeliverBySms(user_id=user_id, factor_id=factor_id))

    def deliver_otp_by_email(self, user_id: str, factor_id: str) -> ResponseObject:
        return self.execute(DeliverByEmail(user_id=user_id, factor_id=factor_id))

    def deliver_otp_by_push(self, user_id: str, factor_id: str) -> ResponseObject:
        return self.execute(DeliverByPush(user_id=user_id, factor_id=factor_id))

    def deliver_otp_by_help_desk(self, user_id: str, factor_id: str) -> ResponseObject:
        return self.execute(DeliverByHelpDesk(user_id=user_id, factor_id=factor_id))

    def close(self):
        """Close the HTTP session."""
        if hasattr(self, 'session'):
            self.session.close()
            logger.debug("HTTP session closed")

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()


def create_client(
    host: str,
    port: int,
    ssl: bool,
    realm: str,
    application_id: str,
    application_key: str,
    timeout: float = 30.0,
    verify_ssl: bool = True,
    retry_attempts: int = 3
) -> SARestClient:
    """
    Create a client for the appliance.

    Args:
        host: FQDN of the appliance
        port: Port of the appliance's web application
        ssl: Use HTTPS
        realm: Realm that enables the REST API
        application_id: Application ID from the realm
        application_key: Application Key from the realm
        timeout: Request timeout in seconds
        verify_ssl: Whether to verify SSL certificates
        retry_attempts: Number of retry attempts for failed requests

    Returns:
        SARestClient: Configured client
    """
    config = ApplianceConfig(
        host=host,
        port=port,
        ssl=ssl,
        timeout=timeout,
        verify_ssl=verify_ssl,
        retry_attempts=retry_attempts
    )
    credentials = CredentialContext(
        application_id=application_id,
        application_key=application_key,
        realm=realm
    )
    return SARestClient(config, credentials)
