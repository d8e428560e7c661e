"""
Signing facade: turns an operation into a signed call

prepare() resolves the operation's path, takes a fresh timestamp from the
injected source, builds the canonical request and signs it. It performs no I/O;
sending the call is the transport's job.
"""

import logging
from typing import Optional

from ..credentials import CredentialContext
from ..exceptions import SARestErrorCodes, UnsupportedVariantError
from ..operations import SignableOperation
from .canonical_message import build_canonical_request
from .hmac_signer import HMACSigner
from .types import PreparedCall, TimestampSource
from .utils import resolve_timestamp, PerformanceTimer

logger = logging.getLogger(__name__)


class SignedCallFacade:
    """
    Prepares signed calls for one set of credentials.

    Args:
        credentials: Application credentials
        timestamp_source: Callable returning the current aware datetime;
            defaults to the UTC clock
        diagnostics: Logger for signing diagnostics; defaults to this
            module's logger
    """

    def __init__(
        self,
        credentials: CredentialContext,
        timestamp_source: Optional[TimestampSource] = None,
        diagnostics: Optional[logging.Logger] = None
    ):
        self.signer = HMACSigner(credentials)
        self.credentials = credentials
        self.timestamp_source = timestamp_source
        self.logger = diagnostics or logger

    def prepare(self, operation: SignableOperation) -> PreparedCall:
        """
        Build the signed call for an operation.

        Args:
            operation: Operation variant to sign

        Returns:
            PreparedCall: Headers, path and body for the transport

        Raises:
            UnsupportedVariantError: If operation isn't a known variant
            ClockSourceError: If no timestamp could be obtained
            SigningError: If canonicalization or signing fails
        """
        if not isinstance(operation, SignableOperation):
            raise UnsupportedVariantError(
                f"Cannot sign {type(operation).__name__}; expected an operation variant",
                SARestErrorCodes.UNKNOWN_OPERATION,
                {"value_type": type(operation).__name__}
            )

        timer = PerformanceTimer()

        path = operation.resolve_path(self.credentials.realm)
        body = operation.serialize()
        timestamp = resolve_timestamp(self.timestamp_source)

        canonical = build_canonical_request(operation.method, path, body, timestamp)
        authorization = self.signer.authorization_header(canonical)

        self.logger.debug(
            "Prepared %s call: %s %s at %s (%.2fms)",
            operation.type_name, operation.method.value, path, timestamp, timer.elapsed_ms()
        )

        return PreparedCall(
            authorization=authorization,
            date=timestamp,
            method=operation.method,
            path=path,
            body=body,
            canonical=canonical
        )


def prepare(
    operation: SignableOperation,
    credentials: CredentialContext,
    timestamp_source: Optional[TimestampSource] = None,
    diagnostics: Optional[logging.Logger] = None
) -> PreparedCall:
    """
    Prepare a signed call without keeping a facade around.

    See SignedCallFacade.prepare.
    """
    return SignedCallFacade(credentials, timestamp_source, diagnostics).prepare(operation)
