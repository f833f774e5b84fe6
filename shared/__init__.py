"""
Shared utilities for the Nhost Python client.

This package aggregates the cross-cutting building blocks consumed by the
client and its service adapters:

- config: Client configuration via pydantic-settings
- logging: Structured logging with trace correlation
- errors: Canonical error types and error payloads

Do not import from nhost_client into shared/.
"""
