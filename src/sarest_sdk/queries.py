"""
REST routes exposed by the appliance

Realm and user identifiers are substituted here so that the signing layer only
ever sees fully resolved paths.
"""

from urllib.parse import quote

API_VERSION = 'v1'


def _segment(value: str) -> str:
    return quote(value, safe='')


def auth_path(realm: str) -> str:
    """Path for every validation and OTP delivery call."""
    return f"/{_segment(realm)}/api/{API_VERSION}/auth"


def factors_path(realm: str, user_id: str) -> str:
    """Path listing the second factors available to a user."""
    return f"/{_segment(realm)}/api/{API_VERSION}/users/{_segment(user_id)}/factors"


def ip_eval_path(realm: str) -> str:
    """Path for IP risk evaluation."""
    return f"/{_segment(realm)}/api/{API_VERSION}/ipeval"
