from __future__ import annotations

import json
from pathlib import Path

import pytest

from scaffoldkit.cli import main as cli_main
from scaffoldkit.settings import RuntimeSettings


@pytest.mark.usefixtures("runtime_settings")
def test_generate_hello_world(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    destination = tmp_path / "my-app"
    exit_code = cli_main.main(
        [
            "generate",
            "template-mobile-hello-world",
            str(destination),
            "--param",
            "fileName=MyApp",
            "--json",
        ]
    )
    assert exit_code == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["template"] == "Hello World with Tabris"
    assert [Path(item["destination"]).name for item in payload["files"]] == [
        "MyApp.js",
        "package.json",
        "package.json",
        "tabris.min.js",
        "boot.min.js",
    ]
    assert (destination / "MyApp.js").exists()
    assert (destination / "node_modules" / "tabris" / "boot.min.js").exists()


@pytest.mark.usefixtures("runtime_settings")
def test_generate_missing_parameter_reports_action(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    exit_code = cli_main.main(["generate", "template-mobile-hello-world", str(tmp_path / "app")])
    assert exit_code == 1
    err = capsys.readouterr().err
    assert "unresolved parameter 'fileName'" in err
    assert "action #0" in err
    assert not (tmp_path / "app").exists()


@pytest.mark.usefixtures("runtime_settings")
def test_generate_fail_on_conflict(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    destination = tmp_path / "app"
    destination.mkdir()
    (destination / "package.json").write_text("{}", encoding="utf-8")
    exit_code = cli_main.main(
        [
            "generate",
            "template-mobile-hello-world",
            str(destination),
            "--param",
            "fileName=MyApp",
            "--on-conflict",
            "fail",
        ]
    )
    assert exit_code == 1
    assert "already exists" in capsys.readouterr().err
    assert (destination / "package.json").read_text(encoding="utf-8") == "{}"
    assert not (destination / "MyApp.js").exists()


@pytest.mark.usefixtures("runtime_settings")
def test_generate_rejects_bad_param_syntax(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    exit_code = cli_main.main(["generate", "template-mobile-hello-world", str(tmp_path), "--param", "fileName"])
    assert exit_code == 2
    assert "KEY=VALUE" in capsys.readouterr().err


def test_generate_from_custom_root(runtime_settings: RuntimeSettings, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    root = tmp_path / "custom"
    bundle = root / "notes"
    bundle.mkdir(parents=True)
    (bundle / "note.md").write_text("# {{title}}\n", encoding="utf-8")
    (bundle / "template.yaml").write_text(
        "name: Notes\nsources:\n  - location: notes/note.md\n    action: generate\n    rename: '{{title}}.md'\n",
        encoding="utf-8",
    )
    exit_code = cli_main.main(
        ["generate", "notes", str(tmp_path / "out"), "--root", str(root), "--param", "title=Todo"]
    )
    assert exit_code == 0
    assert "Generated Notes" in capsys.readouterr().out
    assert (tmp_path / "out" / "Todo.md").read_text(encoding="utf-8") == "# Todo\n"
    assert not any(runtime_settings.template_dir.iterdir())
