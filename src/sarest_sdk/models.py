"""
Result records for appliance responses

Only the documented fields are mapped; the decoded body is always kept in
`raw` for anything else.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

SUCCESS_STATUSES = frozenset({'found', 'valid', 'verified', 'success'})


@dataclass
class ResponseObject:
    """Generic response to validation and OTP delivery calls."""
    status: str
    message: str = ""
    user_id: Optional[str] = None
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    @property
    def succeeded(self) -> bool:
        """True when the appliance accepted the request (user found, credential valid, OTP sent)."""
        return (self.status or "").lower() in SUCCESS_STATUSES

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ResponseObject':
        return cls(
            status=data.get('status', ''),
            message=data.get('message', ''),
            user_id=data.get('user_id'),
            raw=data
        )


@dataclass
class Factor:
    """A second factor registered for a user"""
    type: str
    id: str
    value: Optional[str] = None
    capabilities: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Factor':
        return cls(
            type=data.get('type', ''),
            id=data.get('id', ''),
            value=data.get('value'),
            capabilities=list(data.get('capabilities') or [])
        )


@dataclass
class FactorsResponse(ResponseObject):
    """Factors available to a user"""
    factors: List[Factor] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'FactorsResponse':
        return cls(
            status=data.get('status', ''),
            message=data.get('message', ''),
            user_id=data.get('user_id'),
            raw=data,
            factors=[Factor.from_dict(item) for item in data.get('factors') or []]
        )

    def find(self, factor_type: str) -> List[Factor]:
        """Factors of the given type, e.g. "phone" or "push"."""
        return [factor for factor in self.factors if factor.type == factor_type]


@dataclass
class IPEval:
    """
    IP risk evaluation result

    Attributes:
        status: Response status
        message: Response message
        ip_address: Evaluated address
        risk_factor: Numeric risk score
        risk_color: Risk band reported by the appliance
        risk_desc: Human readable risk description
        geoloc: Geolocation details as returned
    """
    status: str
    message: str = ""
    ip_address: Optional[str] = None
    risk_factor: Optional[int] = None
    risk_color: Optional[str] = None
    risk_desc: Optional[str] = None
    geoloc: Dict[str, Any] = field(default_factory=dict)
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'IPEval':
        evaluation = data.get('ip_evaluation') or {}
        risk_factor = evaluation.get('risk_factor')
        return cls(
            status=data.get('status', ''),
            message=data.get('message', ''),
            ip_address=evaluation.get('ip'),
            risk_factor=int(risk_factor) if risk_factor is not None else None,
            risk_color=evaluation.get('risk_color'),
            risk_desc=evaluation.get('risk_desc'),
            geoloc=dict(evaluation.get('geoloc') or {}),
            raw=data
        )
