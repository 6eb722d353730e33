"""Telemetry plumbing for the demo service.

Structured JSON logs on stdout (structlog), Prometheus metrics served from
``/metrics`` (prometheus-client) and OpenTelemetry traces pushed over OTLP-HTTP.
"""
