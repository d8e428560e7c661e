"""
SecureAuth REST Python SDK
Signed access to the SecureAuth appliance's authentication REST API
"""

from .version import __version__
from .exceptions import (
    SARestSDKError,
    SARestErrorCodes,
    ConfigurationError,
    UnsupportedVariantError,
    ClockSourceError,
    SigningError,
    ApplianceCommunicationError,
    ApplianceResponseError,
)
from .credentials import CredentialContext
# The signing package must load before operations, which import its types
from .signing import (
    CanonicalRequest,
    PreparedCall,
    HttpMethod,
    HMACSigner,
    SignedCallFacade,
    prepare,
    sign,
    verify_signature,
    build_canonical_request,
    format_authorization_header,
    format_http_date,
    fixed_timestamp_source,
    AUTHORIZATION_HEADER,
    DATE_HEADER,
)
from .operations import (
    FactorType,
    SignableOperation,
    FactorOperation,
    ValidateUserId,
    ValidatePassword,
    ValidateKba,
    ValidateOath,
    DeliverByCall,
    DeliverBySms,
    DeliverByEmail,
    DeliverByPush,
    DeliverByHelpDesk,
    IPRiskRequest,
    FactorsQuery,
    FACTOR_OPERATIONS,
    create_operation,
    create_factor_operation,
)
from .models import (
    ResponseObject,
    Factor,
    FactorsResponse,
    IPEval,
)
from .http_client import (
    SARestClient,
    ApplianceConfig,
    create_client,
)
from .config import (
    SDKConfig,
    load_config_from_dict,
    load_config_from_json,
    load_config_from_file,
    load_config_from_env,
)

__all__ = [
    '__version__',
    # Exceptions
    'SARestSDKError',
    'SARestErrorCodes',
    'ConfigurationError',
    'UnsupportedVariantError',
    'ClockSourceError',
    'SigningError',
    'ApplianceCommunicationError',
    'ApplianceResponseError',
    # Credentials
    'CredentialContext',
    # Signing
    'CanonicalRequest',
    'PreparedCall',
    'HttpMethod',
    'HMACSigner',
    'SignedCallFacade',
    'prepare',
    'sign',
    'verify_signature',
    'build_canonical_request',
    'format_authorization_header',
    'format_http_date',
    'fixed_timestamp_source',
    'AUTHORIZATION_HEADER',
    'DATE_HEADER',
    # Operations
    'FactorType',
    'SignableOperation',
    'FactorOperation',
    'ValidateUserId',
    'ValidatePassword',
    'ValidateKba',
    'ValidateOath',
    'DeliverByCall',
    'DeliverBySms',
    'DeliverByEmail',
    'DeliverByPush',
    'DeliverByHelpDesk',
    'IPRiskRequest',
    'FactorsQuery',
    'FACTOR_OPERATIONS',
    'create_operation',
    'create_factor_operation',
    # Results
    'ResponseObject',
    'Factor',
    'FactorsResponse',
    'IPEval',
    # HTTP client
    'SARestClient',
    'ApplianceConfig',
    'create_client',
    # Configuration
    'SDKConfig',
    'load_config_from_dict',
    'load_config_from_json',
    'load_config_from_file',
    'load_config_from_env',
]
