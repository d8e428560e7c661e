"""
Tests for response records
"""

from sarest_sdk import Factor, FactorsResponse, IPEval, ResponseObject


class TestResponseObject:
    """Test generic response mapping"""

    def test_success(self):
        result = ResponseObject.from_dict({"status": "found", "message": "User Id found", "user_id": "jdoe"})
        assert result.succeeded
        assert result.user_id == "jdoe"
        assert result.raw["message"] == "User Id found"

    def test_negative_result_is_a_record(self):
        result = ResponseObject.from_dict({"status": "not_found", "message": "User Id was not found."})
        assert result is not None
        assert not result.succeeded
        assert result.message == "User Id was not found."

    def test_status_case_insensitive(self):
        assert ResponseObject(status="Valid").succeeded

    def test_missing_fields(self):
        result = ResponseObject.from_dict({})
        assert result.status == ""
        assert not result.succeeded


class TestFactorsResponse:
    """Test factor list mapping"""

    def test_factors(self):
        data = {
            "status": "found",
            "message": "",
            "user_id": "jdoe",
            "factors": [
                {"type": "phone", "id": "Phone1", "value": "XXX-XXX-1234", "capabilities": ["sms", "call"]},
                {"type": "email", "id": "Email1", "value": "j***@example.com"},
                {"type": "push", "id": "dev123", "value": "iPhone"},
            ],
        }
        result = FactorsResponse.from_dict(data)
        assert result.succeeded
        assert len(result.factors) == 3
        assert result.find("phone") == [
            Factor(type="phone", id="Phone1", value="XXX-XXX-1234", capabilities=["sms", "call"])
        ]
        assert result.find("email")[0].capabilities == []
        assert result.find("kba") == []

    def test_no_factors(self):
        result = FactorsResponse.from_dict({"status": "not_found", "message": "User Id was not found."})
        assert result.factors == []
        assert not result.succeeded


class TestIPEval:
    """Test IP risk evaluation mapping"""

    def test_evaluation(self):
        data = {
            "status": "verified",
            "message": "",
            "ip_evaluation": {
                "method": "aggregation",
                "ip": "203.0.113.7",
                "risk_factor": "25",
                "risk_color": "green",
                "risk_desc": "Low",
                "geoloc": {"country": "us", "city": "irvine"},
            },
        }
        result = IPEval.from_dict(data)
        assert result.ip_address == "203.0.113.7"
        assert result.risk_factor == 25
        assert result.risk_color == "green"
        assert result.geoloc["city"] == "irvine"
        assert result.raw["ip_evaluation"]["method"] == "aggregation"

    def test_without_evaluation(self):
        result = IPEval.from_dict({"status": "invalid", "message": "Invalid IP"})
        assert result.risk_factor is None
        assert result.geoloc == {}
