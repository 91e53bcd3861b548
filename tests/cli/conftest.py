from __future__ import annotations

from pathlib import Path

import pytest

from scaffoldkit import __version__
from scaffoldkit.cli import main as cli_main
from scaffoldkit.plugins.loader import load_plugins
from scaffoldkit.settings import RuntimeSettings


@pytest.fixture()
def runtime_settings(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> RuntimeSettings:
    """Isolated runtime home for CLI scenarios, without installed plugins."""
    runtime = tmp_path / "runtime"
    home = runtime / "home"
    template_dir = runtime / "templates"
    state_dir = runtime / "state"
    log_dir = runtime / "logs"
    for directory in (home, template_dir, state_dir, log_dir):
        directory.mkdir(parents=True, exist_ok=True)
    settings = RuntimeSettings(
        home_dir=home,
        template_dir=template_dir,
        state_dir=state_dir,
        log_dir=log_dir,
        cli_version=__version__,
    )
    monkeypatch.setattr(cli_main, "SETTINGS", settings, raising=False)
    monkeypatch.setattr(cli_main, "load_plugins", lambda current: load_plugins(current, entry_points=[]), raising=False)
    monkeypatch.setenv("SCAFFOLDKIT_TELEMETRY", "1")
    return settings
