"""
Tests for the signing facade
"""

import base64
import hashlib
import hmac
import json
import logging
from datetime import datetime, timezone
from unittest.mock import Mock

import pytest

from sarest_sdk import (
    CredentialContext,
    DeliverByPush,
    FactorsQuery,
    HttpMethod,
    IPRiskRequest,
    SignedCallFacade,
    ValidatePassword,
    prepare,
)
from sarest_sdk.exceptions import ClockSourceError, UnsupportedVariantError, SARestErrorCodes
from sarest_sdk.signing import parse_authorization_header

TIMESTAMP = "Tue, 03 Jun 2025 14:00:00 GMT"
FIXED_MOMENT = datetime(2025, 6, 3, 14, 0, 0, tzinfo=timezone.utc)


def fixed_clock():
    return FIXED_MOMENT


class TestPrepare:
    """Test preparing signed calls"""

    def setup_method(self):
        """Set up test fixtures"""
        self.ctx = CredentialContext(
            application_id="2f8ab4c0",
            application_key="9c1d0e7fa5b34b2e8e1c",
            realm="secureauth2"
        )

    def test_password_call(self):
        call = prepare(ValidatePassword(user_id="jdoe", token="hunter2"), self.ctx, fixed_clock)

        payload = '{"type":"password","user_id":"jdoe","token":"hunter2"}'
        canonical = f"POST\n/secureauth2/api/v1/auth\n{payload}\n{TIMESTAMP}"
        expected = base64.b64encode(
            hmac.new(b"9c1d0e7fa5b34b2e8e1c", canonical.encode('utf-8'), hashlib.sha256).digest()
        ).decode('ascii')

        assert call.body == payload
        assert call.path == "/secureauth2/api/v1/auth"
        assert call.method == HttpMethod.POST
        assert call.date == TIMESTAMP
        assert call.canonical.text == canonical
        assert call.authorization == (
            f'HMAC-SHA256 application_id="2f8ab4c0", realm="secureauth2", signature="{expected}"'
        )

    def test_push_call_has_no_token(self):
        call = prepare(DeliverByPush(user_id="jdoe", factor_id="dev123"), self.ctx, fixed_clock)
        assert json.loads(call.body) == {"type": "push", "user_id": "jdoe", "factor_id": "dev123"}
        assert call.body == '{"type":"push","user_id":"jdoe","factor_id":"dev123"}'

    def test_idempotent_with_fixed_clock(self):
        op = ValidatePassword(user_id="jdoe", token="hunter2")
        first = prepare(op, self.ctx, fixed_clock)
        second = prepare(op, self.ctx, fixed_clock)
        assert first == second

    def test_new_timestamp_per_call(self):
        moments = iter([FIXED_MOMENT, FIXED_MOMENT.replace(second=1)])
        facade = SignedCallFacade(self.ctx, lambda: next(moments))
        op = ValidatePassword(user_id="jdoe", token="hunter2")

        first = facade.prepare(op)
        second = facade.prepare(op)
        assert first.date == TIMESTAMP
        assert second.date == "Tue, 03 Jun 2025 14:00:01 GMT"
        assert first.authorization != second.authorization

    def test_factors_query_signs_empty_body(self):
        call = prepare(FactorsQuery(user_id="jdoe"), self.ctx, fixed_clock)
        assert call.method == HttpMethod.GET
        assert call.path == "/secureauth2/api/v1/users/jdoe/factors"
        assert call.body == ""
        assert call.canonical.text == f"GET\n/secureauth2/api/v1/users/jdoe/factors\n\n{TIMESTAMP}"

    def test_ip_risk_call(self):
        call = prepare(IPRiskRequest(user_id="jdoe", ip_address="203.0.113.7"), self.ctx, fixed_clock)
        assert call.path == "/secureauth2/api/v1/ipeval"
        assert '"type":"risk"' in call.body

    def test_header_carries_realm_and_id(self):
        call = prepare(ValidatePassword(user_id="jdoe", token="hunter2"), self.ctx, fixed_clock)
        fields = parse_authorization_header(call.headers()["Authorization"])
        assert fields["application_id"] == "2f8ab4c0"
        assert fields["realm"] == "secureauth2"

    def test_key_never_in_output(self):
        call = prepare(ValidatePassword(user_id="jdoe", token="hunter2"), self.ctx, fixed_clock)
        for value in (call.authorization, call.body, call.path, repr(call)):
            assert "9c1d0e7fa5b34b2e8e1c" not in value

    def test_rejects_non_operation(self):
        with pytest.raises(UnsupportedVariantError) as exc_info:
            prepare({"type": "password", "user_id": "jdoe"}, self.ctx, fixed_clock)
        assert exc_info.value.error_code == SARestErrorCodes.UNKNOWN_OPERATION

    def test_clock_failure(self):
        def broken():
            raise OSError("no clock")

        with pytest.raises(ClockSourceError):
            prepare(ValidatePassword(user_id="jdoe", token="hunter2"), self.ctx, broken)

    def test_naive_clock_rejected(self):
        with pytest.raises(ClockSourceError) as exc_info:
            prepare(ValidatePassword(user_id="jdoe", token="hunter2"), self.ctx, lambda: datetime(2025, 6, 3))
        assert exc_info.value.error_code == SARestErrorCodes.INVALID_TIMESTAMP

    def test_injected_diagnostics_logger(self):
        diagnostics = Mock(spec=logging.Logger)
        prepare(ValidatePassword(user_id="jdoe", token="hunter2"), self.ctx, fixed_clock, diagnostics)

        diagnostics.debug.assert_called_once()
        logged = " ".join(str(arg) for arg in diagnostics.debug.call_args[0])
        assert "password" in logged
        assert "hunter2" not in logged
        assert "9c1d0e7fa5b34b2e8e1c" not in logged

    def test_default_logger(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="sarest_sdk.signing.prepare"):
            prepare(FactorsQuery(user_id="jdoe"), self.ctx, fixed_clock)
        assert "Prepared factors call" in caplog.text
