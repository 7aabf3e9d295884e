"""
Shared utilities for the rating prompt service.

This package aggregates common building blocks consumed by the service:

- config: Service configuration via pydantic-settings
- logging: Structured logging with launch correlation
- errors: Canonical error types

Do not import from service_* packages into shared/.
"""
