"""Runtime settings for the scaffold CLI."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from scaffoldkit import __version__

HOME_ENV = "SCAFFOLDKIT_HOME"


@dataclass(frozen=True)
class RuntimeSettings:
    home_dir: Path
    template_dir: Path
    state_dir: Path
    log_dir: Path
    cli_version: str = __version__

    @property
    def telemetry_file(self) -> Path:
        return self.log_dir / "telemetry.jsonl"


def _default_home_dir() -> Path:
    override = os.environ.get(HOME_ENV)
    if override:
        return Path(override).expanduser()
    return Path.home() / ".scaffoldkit"


def load_settings() -> RuntimeSettings:
    base = _default_home_dir()
    template_dir = base / "templates"
    state_dir = base / "state"
    log_dir = base / "logs"
    return RuntimeSettings(
        home_dir=base,
        template_dir=template_dir,
        state_dir=state_dir,
        log_dir=log_dir,
    )


SETTINGS = load_settings()
