"""
Operations that can be signed and sent to the appliance

Each authentication or OTP delivery call is its own frozen dataclass carrying
exactly the fields that call needs, so a push delivery can't be built with a
token and a password check can't be built without one. The set of variants is
closed: FACTOR_OPERATIONS maps every discriminator to its class.
"""

import json
from abc import ABC, abstractmethod
from dataclasses import dataclass, fields
from enum import Enum
from typing import ClassVar, Dict, Optional, Type

from .exceptions import UnsupportedVariantError, SARestErrorCodes
from .queries import auth_path, factors_path, ip_eval_path
from .signing.types import HttpMethod

# Payload keys, in the order they are serialized after "type"
PAYLOAD_FIELDS = ('user_id', 'token', 'factor_id', 'ip_address')


class FactorType(str, Enum):
    """Discriminators accepted by the auth endpoint"""
    USER_ID = "user_id"
    PASSWORD = "password"
    KBA = "kba"
    OATH = "oath"
    CALL = "call"
    SMS = "sms"
    EMAIL = "email"
    PUSH = "push"
    HELP_DESK = "help_desk"


RISK_TYPE = "risk"
FACTORS_TYPE = "factors"


def serialize_payload(payload: Optional[Dict[str, str]]) -> str:
    """
    Serialize a request payload to the exact text that is signed and sent.

    Args:
        payload: Ordered payload mapping, or None for bodiless calls

    Returns:
        str: Compact JSON, or an empty string when there is no payload
    """
    if payload is None:
        return ""
    return json.dumps(payload, separators=(',', ':'), ensure_ascii=False)


@dataclass(frozen=True, init=False)
class SignableOperation(ABC):
    """
    Base class for every request the signing facade accepts

    Variants are declared with ``init=False`` and share this constructor, so
    a field the variant doesn't carry, or a missing one, raises
    UnsupportedVariantError instead of a bare TypeError.
    """
    method: ClassVar[HttpMethod] = HttpMethod.POST
    type_name: ClassVar[str] = ""

    def __init__(self, *args: str, **values: Optional[str]):
        names = [f.name for f in fields(self)]
        if len(args) > len(names):
            raise UnsupportedVariantError(
                f"'{self.type_name}' operation takes at most {len(names)} values",
                SARestErrorCodes.UNEXPECTED_FIELD,
                {"type": self.type_name, "fields": names}
            )

        for name, value in zip(names, args):
            if name in values:
                raise UnsupportedVariantError(
                    f"'{self.type_name}' operation got '{name}' twice",
                    SARestErrorCodes.UNEXPECTED_FIELD,
                    {"type": self.type_name, "fields": [name]}
                )
            values[name] = value

        unexpected = sorted(set(values) - set(names))
        if unexpected:
            raise UnsupportedVariantError(
                f"'{self.type_name}' operation does not accept: {', '.join(unexpected)}",
                SARestErrorCodes.UNEXPECTED_FIELD,
                {"type": self.type_name, "fields": unexpected}
            )

        missing = [name for name in names if values.get(name) is None]
        if missing:
            raise UnsupportedVariantError(
                f"'{self.type_name}' operation requires: {', '.join(missing)}",
                SARestErrorCodes.MISSING_FIELD,
                {"type": self.type_name, "fields": missing}
            )

        for name in names:
            object.__setattr__(self, name, values[name])
        self.__post_init__()

    def __post_init__(self):
        """Reject blank required fields at construction time"""
        for f in fields(self):
            value = getattr(self, f.name)
            if not isinstance(value, str) or not value:
                raise UnsupportedVariantError(
                    f"'{self.type_name}' operation requires a non-empty '{f.name}'",
                    SARestErrorCodes.MISSING_FIELD,
                    {"type": self.type_name, "field": f.name}
                )

    @abstractmethod
    def resolve_path(self, realm: str) -> str:
        """Fully resolved request path for this operation under the realm."""

    def to_payload(self) -> Optional[Dict[str, str]]:
        """Ordered payload: the discriminator followed by the variant's fields."""
        payload = {'type': self.type_name}
        present = {f.name for f in fields(self)}
        for name in PAYLOAD_FIELDS:
            if name in present:
                payload[name] = getattr(self, name)
        return payload

    def serialize(self) -> str:
        return serialize_payload(self.to_payload())


@dataclass(frozen=True, init=False)
class FactorOperation(SignableOperation):
    """A validation or OTP delivery call against the realm's auth endpoint"""
    factor_type: ClassVar[FactorType]

    @property
    def type_name(self) -> str:
        return self.factor_type.value

    def resolve_path(self, realm: str) -> str:
        return auth_path(realm)


@dataclass(frozen=True, init=False)
class ValidateUserId(FactorOperation):
    """Check that the user exists in the appliance's datastore"""
    factor_type: ClassVar[FactorType] = FactorType.USER_ID
    user_id: str


@dataclass(frozen=True, init=False)
class ValidatePassword(FactorOperation):
    """Check the user's password"""
    factor_type: ClassVar[FactorType] = FactorType.PASSWORD
    user_id: str
    token: str


@dataclass(frozen=True, init=False)
class ValidateKba(FactorOperation):
    """Check the answer to a knowledge-based question (factor_id is the question id)"""
    factor_type: ClassVar[FactorType] = FactorType.KBA
    user_id: str
    token: str
    factor_id: str


@dataclass(frozen=True, init=False)
class ValidateOath(FactorOperation):
    """Check a one-time passcode from an OATH device (factor_id is the device id)"""
    factor_type: ClassVar[FactorType] = FactorType.OATH
    user_id: str
    token: str
    factor_id: str


@dataclass(frozen=True, init=False)
class DeliverByCall(FactorOperation):
    """Deliver an OTP by voice call, e.g. factor_id "Phone1" """
    factor_type: ClassVar[FactorType] = FactorType.CALL
    user_id: str
    factor_id: str


@dataclass(frozen=True, init=False)
class DeliverBySms(FactorOperation):
    factor_type: ClassVar[FactorType] = FactorType.SMS
    user_id: str
    factor_id: str


@dataclass(frozen=True, init=False)
class DeliverByEmail(FactorOperation):
    factor_type: ClassVar[FactorType] = FactorType.EMAIL
    user_id: str
    factor_id: str


@dataclass(frozen=True, init=False)
class DeliverByPush(FactorOperation):
    """Send a push notification to a registered device"""
    factor_type: ClassVar[FactorType] = FactorType.PUSH
    user_id: str
    factor_id: str


@dataclass(frozen=True, init=False)
class DeliverByHelpDesk(FactorOperation):
    factor_type: ClassVar[FactorType] = FactorType.HELP_DESK
    user_id: str
    factor_id: str


@dataclass(frozen=True, init=False)
class IPRiskRequest(SignableOperation):
    """IP risk evaluation for a user's access attempt"""
    type_name: ClassVar[str] = RISK_TYPE
    user_id: str
    ip_address: str

    def resolve_path(self, realm: str) -> str:
        return ip_eval_path(realm)


@dataclass(frozen=True, init=False)
class FactorsQuery(SignableOperation):
    """List the second factors available to a user (bodiless GET)"""
    method: ClassVar[HttpMethod] = HttpMethod.GET
    type_name: ClassVar[str] = FACTORS_TYPE
    user_id: str

    def resolve_path(self, realm: str) -> str:
        return factors_path(realm, self.user_id)

    def to_payload(self) -> Optional[Dict[str, str]]:
        return None


FACTOR_OPERATIONS: Dict[FactorType, Type[FactorOperation]] = {
    FactorType.USER_ID: ValidateUserId,
    FactorType.PASSWORD: ValidatePassword,
    FactorType.KBA: ValidateKba,
    FactorType.OATH: ValidateOath,
    FactorType.CALL: DeliverByCall,
    FactorType.SMS: DeliverBySms,
    FactorType.EMAIL: DeliverByEmail,
    FactorType.PUSH: DeliverByPush,
    FactorType.HELP_DESK: DeliverByHelpDesk,
}

OPERATION_TYPES: Dict[str, Type[SignableOperation]] = {
    **{factor_type.value: cls for factor_type, cls in FACTOR_OPERATIONS.items()},
    RISK_TYPE: IPRiskRequest,
    FACTORS_TYPE: FactorsQuery,
}


def create_operation(operation_type: str, **values: Optional[str]) -> SignableOperation:
    """
    Build an operation from its discriminator and field values.

    Fields passed as None are treated as absent.

    Args:
        operation_type: One of the factor discriminators, "risk" or "factors"
        **values: Field values (user_id, token, factor_id, ip_address)

    Returns:
        SignableOperation: The matching variant instance

    Raises:
        UnsupportedVariantError: If the type is unknown or the fields don't
            match the variant
    """
    key = operation_type.value if isinstance(operation_type, Enum) else operation_type
    cls = OPERATION_TYPES.get(key)
    if cls is None:
        raise UnsupportedVariantError(
            f"Unknown operation type: {operation_type}",
            SARestErrorCodes.UNKNOWN_OPERATION,
            {"type": operation_type, "supported_types": sorted(OPERATION_TYPES)}
        )

    provided = {name: value for name, value in values.items() if value is not None}
    return cls(**provided)


def create_factor_operation(
    factor_type: str,
    user_id: Optional[str],
    token: Optional[str] = None,
    factor_id: Optional[str] = None
) -> FactorOperation:
    """
    Build one of the nine validation/delivery variants from its discriminator.

    Raises:
        UnsupportedVariantError: If the type isn't a factor type or the fields
            don't match it
    """
    key = factor_type.value if isinstance(factor_type, Enum) else factor_type
    if key not in {t.value for t in FactorType}:
        raise UnsupportedVariantError(
            f"Unknown factor type: {factor_type}",
            SARestErrorCodes.UNKNOWN_OPERATION,
            {"type": factor_type, "supported_types": [t.value for t in FactorType]}
        )
    return create_operation(key, user_id=user_id, token=token, factor_id=factor_id)
