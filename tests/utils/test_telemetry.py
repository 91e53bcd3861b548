from __future__ import annotations

from pathlib import Path

import jsonschema
import pytest

from scaffoldkit.settings import RuntimeSettings
from scaffoldkit.utils import telemetry


@pytest.fixture()
def settings(tmp_path: Path) -> RuntimeSettings:
    return RuntimeSettings(
        home_dir=tmp_path,
        template_dir=tmp_path / "templates",
        state_dir=tmp_path / "state",
        log_dir=tmp_path / "logs",
        cli_version="0.1.0",
    )


def test_record_and_summarize(settings: RuntimeSettings, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv(telemetry.TELEMETRY_ENV, "1")
    telemetry.record_event(settings, "templates.list", {"count": 1})
    telemetry.record_structured_event(
        settings,
        "scaffold.generate",
        payload={"template": "demo"},
        status="ok",
        component="scaffold",
        duration_ms=1.5,
    )
    events = list(telemetry.iter_events(settings))
    assert [event["event"] for event in events] == ["templates.list", "scaffold.generate"]
    assert events[1]["durationMs"] == 1.5
    summary = telemetry.summarize(events)
    assert summary == {
        "total": 2,
        "by_event": {"templates.list": 1, "scaffold.generate": 1},
        "by_status": {"unknown": 1, "ok": 1},
    }

    telemetry.clear(settings)
    assert list(telemetry.iter_events(settings)) == []


def test_telemetry_can_be_disabled(settings: RuntimeSettings, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv(telemetry.TELEMETRY_ENV, "off")
    telemetry.record_event(settings, "templates.list")
    assert not settings.telemetry_file.exists()


def test_invalid_records_are_rejected(settings: RuntimeSettings, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv(telemetry.TELEMETRY_ENV, "1")
    with pytest.raises(ValueError):
        telemetry.record_structured_event(settings, "templates.list", payload={"count": 0}, level="debug")
    with pytest.raises(ValueError):
        telemetry.record_structured_event(settings, " ")
    with pytest.raises(jsonschema.ValidationError):
        telemetry.record_structured_event(
            settings, "templates.list", payload={"count": 0}, correlation_id=123  # type: ignore[arg-type]
        )


def test_events_are_declared_with_their_payload(settings: RuntimeSettings, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv(telemetry.TELEMETRY_ENV, "1")
    with pytest.raises(ValueError, match="not declared"):
        telemetry.record_event(settings, "templates.removed", {"count": 1})
    with pytest.raises(jsonschema.ValidationError):
        telemetry.record_event(settings, "validate", {"kind": "template"})
    with pytest.raises(jsonschema.ValidationError):
        telemetry.record_structured_event(settings, "scaffold.generate", payload={"template": "demo"})
    assert not settings.telemetry_file.exists()

    telemetry.record_event(settings, "smoke.run", {"checks": 2, "failed": 0}, status="ok")
    assert [event["event"] for event in telemetry.iter_events(settings)] == ["smoke.run"]


def test_corrupt_lines_are_skipped(settings: RuntimeSettings) -> None:
    settings.log_dir.mkdir(parents=True)
    settings.telemetry_file.write_text('{"event": "ok"}\nnot json\n\n', encoding="utf-8")
    assert list(telemetry.iter_events(settings)) == [{"event": "ok"}]
