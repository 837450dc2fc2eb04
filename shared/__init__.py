"""
Shared utilities for the Pulse news cache.

This package aggregates common building blocks consumed by the cache
service package:

- config: Settings via pydantic-settings
- logging: Structured logging with correlation context
- metrics: Prometheus metrics helpers
- errors: Canonical error types and responses

Do not import from service_* packages into shared/.
"""
