"""Unit test environment helpers."""

import pytest


@pytest.fixture(autouse=True)
def _minimal_env(monkeypatch):
    """Clear environment overrides so unit tests see the built-in defaults."""
    for name in (
        "MSSQL_PORT",
        "MSSQL_LOGIN_TIMEOUT_SECS",
        "DIAGRAM_OUTPUT_PATH",
        "DIAGRAM_BATCH_COLUMNS",
        "OTEL_EXPORTER_OTLP_ENDPOINT",
        "OTEL_EXPORTER_OTLP_TRACES_ENDPOINT",
        "LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("DAL_TRACE_QUERIES", "false")
    yield
