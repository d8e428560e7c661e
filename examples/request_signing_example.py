#!/usr/bin/env python3
"""
SecureAuth REST Python SDK - Request Signing Example

This example shows how calls to the appliance are prepared and signed with
the realm's application key, and how the SDK reports invalid input. Nothing
is sent over the network.
"""

import sys
import os
from datetime import datetime, timezone

# Add src to path for development
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from sarest_sdk import (
    CredentialContext,
    SignedCallFacade,
    ValidatePassword,
    DeliverByPush,
    FactorsQuery,
    create_operation,
    verify_signature,
    fixed_timestamp_source,
    SARestSDKError,
)
from sarest_sdk.signing import parse_authorization_header


def basic_signing_example(ctx):
    """Sign a password validation at a fixed instant"""
    print("=== Basic Request Signing Example ===")

    facade = SignedCallFacade(ctx, fixed_timestamp_source("Tue, 03 Jun 2025 14:00:00 GMT"))
    call = facade.prepare(ValidatePassword(user_id="jdoe", token="hunter2"))

    print(f"   {call.method.value} {call.path}")
    print(f"   Body: {call.body}")
    for name, value in call.headers().items():
        print(f"   {name}: {value}")

    print("\n   Canonical string:")
    for line in call.canonical.text.split("\n"):
        print(f"     {line}")

    signature = parse_authorization_header(call.authorization)["signature"]
    print(f"\n   Signature verifies: {verify_signature(call.canonical, ctx.application_key, signature)}")


def variants_example(ctx):
    """Show the payload each operation produces"""
    print("\n\n=== Operation Variants Example ===")

    facade = SignedCallFacade(ctx, lambda: datetime.now(timezone.utc))
    operations = [
        DeliverByPush(user_id="jdoe", factor_id="dev123"),
        FactorsQuery(user_id="jdoe"),
        create_operation("risk", user_id="jdoe", ip_address="203.0.113.7"),
    ]
    for operation in operations:
        call = facade.prepare(operation)
        print(f"   {operation.type_name:8} {call.method.value:4} {call.path}  {call.body or '(no body)'}")


def error_handling_example(ctx):
    """Demonstrate error handling"""
    print("\n\n=== Error Handling Example ===")

    try:
        create_operation("push", user_id="jdoe", factor_id="dev123", token="123456")
    except SARestSDKError as e:
        print(f"   Token on push: {type(e).__name__}: {e}")

    try:
        CredentialContext(application_id="app", application_key="", realm="secureauth2")
    except SARestSDKError as e:
        print(f"   Empty key: {type(e).__name__}: {e}")

    try:
        SignedCallFacade(ctx, lambda: datetime(2025, 6, 3)).prepare(FactorsQuery(user_id="jdoe"))
    except SARestSDKError as e:
        print(f"   Naive clock: {type(e).__name__}: {e}")


def main():
    """Run all examples"""
    print("SecureAuth REST Python SDK - Request Signing Examples")
    print("=" * 50)

    ctx = CredentialContext(
        application_id="2f8ab4c0d1e24f6a",
        application_key="9c1d0e7fa5b34b2e8e1c",
        realm="secureauth2"
    )

    basic_signing_example(ctx)
    variants_example(ctx)
    error_handling_example(ctx)


if __name__ == "__main__":
    main()
