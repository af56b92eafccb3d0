"""Tests for the format_result dispatcher and OutputSettings."""

import json

from edgewalk.output.formatters import OutputSettings, format_result
from edgewalk.services.result import ServiceError, ServiceResult


def _ok(op: str = "test", **data: object) -> ServiceResult:
    return ServiceResult(ok=True, op=op, data=dict(data))


class TestOutputSettings:
    def test_defaults(self) -> None:
        s = OutputSettings()
        assert s.json_output is False
        assert s.quiet is False
        assert s.verbose is False


class TestFormatResult:
    def test_json_mode(self) -> None:
        output = format_result(_ok("link", ref="edges/1"), settings=OutputSettings(json_output=True))
        data = json.loads(output)
        assert data["ok"] is True
        assert data["data"]["ref"] == "edges/1"

    def test_json_error(self) -> None:
        result = ServiceResult(ok=False, op="link", error=ServiceError(code="X", message="Bad"))
        data = json.loads(format_result(result, json_output=True))
        assert data["error"]["message"] == "Bad"

    def test_settings_override_kwarg(self) -> None:
        output = format_result(_ok(), settings=OutputSettings(), json_output=True)
        assert not output.startswith("{")

    def test_quiet(self) -> None:
        assert format_result(_ok("setup"), settings=OutputSettings(quiet=True)) == "OK: setup"

    def test_default_is_rich(self) -> None:
        output = format_result(_ok("link", ref="edges/1"))
        assert "OK" in output
        assert "edges/1" in output
