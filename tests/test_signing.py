"""
Test suite for HMAC-SHA256 request signing

This module tests canonical request construction, signing and verification,
authorization header formatting and timestamp handling.
"""

import base64
import hashlib
import hmac
from datetime import datetime, timedelta, timezone

import pytest

from sarest_sdk import CredentialContext
from sarest_sdk.exceptions import ClockSourceError, SigningError, SARestErrorCodes
from sarest_sdk.signing import (
    CanonicalRequest,
    HMACSigner,
    HttpMethod,
    PreparedCall,
    build_canonical_request,
    build_canonical_string,
    fixed_timestamp_source,
    format_authorization_header,
    format_http_date,
    parse_authorization_header,
    parse_http_date,
    resolve_timestamp,
    sign,
    verify_signature,
)

TIMESTAMP = "Tue, 03 Jun 2025 14:00:00 GMT"
PATH = "/secureauth2/api/v1/auth"
PAYLOAD = '{"type":"password","user_id":"jdoe","token":"hunter2"}'


def reference_signature(key: str, message: str) -> str:
    digest = hmac.new(key.encode('utf-8'), message.encode('utf-8'), hashlib.sha256).digest()
    return base64.b64encode(digest).decode('ascii')


class TestCanonicalRequest:
    """Test canonical request construction"""

    def test_canonical_string_layout(self):
        text = build_canonical_string("POST", PATH, PAYLOAD, TIMESTAMP)
        assert text == f"POST\n{PATH}\n{PAYLOAD}\n{TIMESTAMP}"

    def test_none_payload_equals_empty(self):
        with_none = build_canonical_request(HttpMethod.GET, PATH, None, TIMESTAMP)
        with_empty = build_canonical_request(HttpMethod.GET, PATH, "", TIMESTAMP)
        assert with_none == with_empty
        assert with_none.text == f"GET\n{PATH}\n\n{TIMESTAMP}"
        assert with_none.text.count("\n") == 3

    def test_method_string_coerced(self):
        canonical = build_canonical_request("GET", PATH, "", TIMESTAMP)
        assert canonical.method is HttpMethod.GET

    def test_invalid_method(self):
        with pytest.raises(SigningError) as exc_info:
            build_canonical_request("DELETE", PATH, "", TIMESTAMP)
        assert exc_info.value.error_code == SARestErrorCodes.INVALID_METHOD

    def test_relative_path_rejected(self):
        with pytest.raises(SigningError) as exc_info:
            build_canonical_request("POST", "secureauth2/api/v1/auth", "", TIMESTAMP)
        assert exc_info.value.error_code == SARestErrorCodes.INVALID_PATH

    def test_empty_timestamp_rejected(self):
        with pytest.raises(SigningError):
            build_canonical_request("POST", PATH, "", "")

    def test_line_break_in_path_rejected(self):
        with pytest.raises(SigningError):
            build_canonical_request("POST", PATH + "\nGET", "", TIMESTAMP)

    def test_non_string_payload_rejected(self):
        with pytest.raises(SigningError):
            build_canonical_request("POST", PATH, {"type": "password"}, TIMESTAMP)

    def test_to_bytes_is_utf8(self):
        canonical = build_canonical_request("POST", PATH, '{"user_id":"jürgen"}', TIMESTAMP)
        assert canonical.to_bytes() == canonical.text.encode('utf-8')


class TestHMACSigning:
    """Test signature computation and verification"""

    def setup_method(self):
        """Set up test fixtures"""
        self.canonical = build_canonical_request("POST", PATH, PAYLOAD, TIMESTAMP)
        self.key = "9c1d0e7fa5b34b2e8e1c"

    def test_matches_reference_hmac(self):
        expected = reference_signature(self.key, f"POST\n{PATH}\n{PAYLOAD}\n{TIMESTAMP}")
        assert sign(self.canonical, self.key) == expected

    def test_accepts_text_and_bytes(self):
        expected = sign(self.canonical, self.key)
        assert sign(self.canonical.text, self.key) == expected
        assert sign(self.canonical.to_bytes(), self.key.encode('utf-8')) == expected

    def test_deterministic(self):
        assert sign(self.canonical, self.key) == sign(self.canonical, self.key)

    def test_signature_is_padded_base64(self):
        signature = sign(self.canonical, self.key)
        assert len(signature) == 44
        assert signature.endswith("=")
        assert len(base64.b64decode(signature)) == 32

    @pytest.mark.parametrize("field,value", [
        ("method", HttpMethod.GET),
        ("path", "/secureauth2/api/v1/ipeval"),
        ("payload", PAYLOAD.replace("hunter2", "hunter3")),
        ("timestamp", "Tue, 03 Jun 2025 14:00:01 GMT"),
    ])
    def test_any_component_change_changes_signature(self, field, value):
        values = {
            "method": self.canonical.method,
            "path": self.canonical.path,
            "payload": self.canonical.payload,
            "timestamp": self.canonical.timestamp,
        }
        values[field] = value
        tampered = CanonicalRequest(**values)
        assert sign(tampered, self.key) != sign(self.canonical, self.key)

    def test_different_key_changes_signature(self):
        assert sign(self.canonical, self.key) != sign(self.canonical, self.key + "x")

    def test_empty_key_rejected(self):
        with pytest.raises(SigningError):
            sign(self.canonical, "")

    def test_verify_signature(self):
        signature = sign(self.canonical, self.key)
        assert verify_signature(self.canonical, self.key, signature)
        assert not verify_signature(self.canonical, "other-key", signature)

    def test_verify_rejects_garbage(self):
        assert not verify_signature(self.canonical, self.key, "not base64!")
        assert not verify_signature(self.canonical, self.key, base64.b64encode(b"short").decode())


class TestAuthorizationHeader:
    """Test authorization header formatting and parsing"""

    def test_format(self):
        header = format_authorization_header("app-1", "secureauth2", "c2lnbmF0dXJl")
        assert header == 'HMAC-SHA256 application_id="app-1", realm="secureauth2", signature="c2lnbmF0dXJl"'

    def test_parse_round_trip(self):
        header = format_authorization_header("app-1", "secureauth2", "abc+/=")
        assert parse_authorization_header(header) == {
            "application_id": "app-1",
            "realm": "secureauth2",
            "signature": "abc+/=",
        }

    def test_quote_in_value_rejected(self):
        with pytest.raises(SigningError):
            format_authorization_header('app"1', "secureauth2", "sig")

    @pytest.mark.parametrize("application_id,realm", [
        ("app\r\nX-Evil: 1", "secureauth2"),
        ("app-1", "secure\nauth2"),
        ("app-1", "secure\rauth2"),
    ])
    def test_line_break_in_value_rejected(self, application_id, realm):
        with pytest.raises(SigningError) as exc_info:
            format_authorization_header(application_id, realm, "sig")
        assert exc_info.value.error_code == SARestErrorCodes.SIGNING_FAILED

    def test_parse_wrong_scheme(self):
        with pytest.raises(SigningError):
            parse_authorization_header('Basic realm="x"')

    def test_parse_missing_field(self):
        with pytest.raises(SigningError):
            parse_authorization_header('HMAC-SHA256 application_id="a", realm="r"')

    def test_signer_header(self):
        ctx = CredentialContext(application_id="app-1", application_key="key", realm="secureauth2")
        signer = HMACSigner(ctx)
        canonical = build_canonical_request("POST", PATH, PAYLOAD, TIMESTAMP)
        fields = parse_authorization_header(signer.authorization_header(canonical))
        assert fields["application_id"] == "app-1"
        assert fields["realm"] == "secureauth2"
        assert fields["signature"] == reference_signature("key", canonical.text)

    def test_signer_repr_hides_key(self):
        ctx = CredentialContext(application_id="app-1", application_key="very-secret", realm="secureauth2")
        assert "very-secret" not in repr(HMACSigner(ctx))

    def test_signer_requires_credentials(self):
        with pytest.raises(SigningError):
            HMACSigner({"application_id": "app"})


class TestTimestamps:
    """Test HTTP-date handling"""

    def test_format_http_date(self):
        moment = datetime(2025, 6, 3, 14, 0, 0, tzinfo=timezone.utc)
        assert format_http_date(moment) == TIMESTAMP

    def test_format_converts_to_gmt(self):
        moment = datetime(2025, 6, 3, 16, 0, 0, tzinfo=timezone(timedelta(hours=2)))
        assert format_http_date(moment) == TIMESTAMP

    def test_format_rejects_naive(self):
        with pytest.raises(ClockSourceError) as exc_info:
            format_http_date(datetime(2025, 6, 3, 14, 0, 0))
        assert exc_info.value.error_code == SARestErrorCodes.INVALID_TIMESTAMP

    def test_parse_http_date(self):
        assert parse_http_date(TIMESTAMP) == datetime(2025, 6, 3, 14, 0, 0, tzinfo=timezone.utc)

    def test_parse_invalid(self):
        with pytest.raises(ClockSourceError):
            parse_http_date("yesterday")

    def test_fixed_source(self):
        source = fixed_timestamp_source(TIMESTAMP)
        assert resolve_timestamp(source) == TIMESTAMP
        assert resolve_timestamp(source) == TIMESTAMP

    def test_default_source_is_current(self):
        stamp = parse_http_date(resolve_timestamp())
        assert abs((datetime.now(timezone.utc) - stamp).total_seconds()) < 5

    def test_failing_source(self):
        def broken():
            raise RuntimeError("clock unavailable")

        with pytest.raises(ClockSourceError) as exc_info:
            resolve_timestamp(broken)
        assert exc_info.value.error_code == SARestErrorCodes.CLOCK_FAILED

    def test_source_returning_none(self):
        with pytest.raises(ClockSourceError) as exc_info:
            resolve_timestamp(lambda: None)
        assert exc_info.value.error_code == SARestErrorCodes.INVALID_TIMESTAMP


class TestPreparedCall:
    """Test prepared call headers"""

    def _call(self, body):
        canonical = build_canonical_request("POST", PATH, body, TIMESTAMP)
        return PreparedCall(
            authorization="HMAC-SHA256 application_id=\"a\", realm=\"r\", signature=\"s\"",
            date=TIMESTAMP,
            method=HttpMethod.POST,
            path=PATH,
            body=body,
            canonical=canonical
        )

    def test_headers_with_body(self):
        headers = self._call(PAYLOAD).headers()
        assert headers["X-SA-Date"] == TIMESTAMP
        assert headers["Content-Type"] == "application/json"
        assert headers["Accept"] == "application/json"
        assert headers["Authorization"].startswith("HMAC-SHA256 ")

    def test_headers_without_body(self):
        assert "Content-Type" not in self._call("").headers()

    def test_as_tuple(self):
        call = self._call(PAYLOAD)
        assert call.as_tuple() == (call.authorization, PATH, PAYLOAD)
