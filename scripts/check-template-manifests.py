#!/usr/bin/env python3
"""Validate template manifests and view descriptors in a bundle directory."""

from __future__ import annotations

import argparse
import json
import sys
import tempfile
from pathlib import Path
from typing import Any, Dict, List

PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_ROOT = PROJECT_ROOT / "src"
if str(SRC_ROOT) not in sys.path:
    sys.path.insert(0, str(SRC_ROOT))

from scaffoldkit.adapters.fs_template_repo import FSTemplateRepository
from scaffoldkit.app.materialize import ActionExecutor
from scaffoldkit.domain.errors import ScaffoldError
from scaffoldkit.domain.substitution import resolve_values
from scaffoldkit.resources import packaged_templates_root


def check_bundles(root: Path) -> List[Dict[str, Any]]:
    repository = FSTemplateRepository(root)
    reports: List[Dict[str, Any]] = []
    for template_id in repository.template_ids():
        report: Dict[str, Any] = {"bundle": template_id, "kind": "template", "status": "ok", "issues": []}
        try:
            descriptor = repository.load_template(template_id)
            values = _Permissive(resolve_values(descriptor.parameters))
            with tempfile.TemporaryDirectory() as scratch:
                ActionExecutor(repository.root, Path(scratch)).plan(descriptor, values)
        except ScaffoldError as exc:
            report["status"] = "error"
            report["issues"].append(str(exc))
        reports.append(report)
    for view_id in repository.view_ids():
        report = {"bundle": view_id, "kind": "view", "status": "ok", "issues": []}
        try:
            repository.load_view(view_id)
        except ScaffoldError as exc:
            report["status"] = "error"
            report["issues"].append(str(exc))
        reports.append(report)
    return reports


class _Permissive(dict):
    """Resolves every unknown token to its own name."""

    def __contains__(self, key: object) -> bool:
        return True

    def __missing__(self, key: str) -> str:
        return key


def main(argv: list[str]) -> int:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--json", action="store_true", help="print JSON report")
    parser.add_argument("root", nargs="?", type=Path, default=packaged_templates_root())
    args = parser.parse_args(argv)

    if not args.root.is_dir():
        payload = {"status": "skip", "reason": f"bundle root not found: {args.root}"}
        if args.json:
            json.dump(payload, sys.stdout)
            sys.stdout.write("\n")
        return 0

    reports = check_bundles(args.root)
    failed = [report for report in reports if report["status"] != "ok"]
    payload = {"status": "ok" if not failed else "error", "bundles": reports}
    if args.json:
        json.dump(payload, sys.stdout)
        sys.stdout.write("\n")
    else:
        for report in reports:
            marker = "ok " if report["status"] == "ok" else "ERR"
            print(f"{marker} {report['kind']:<8} {report['bundle']}")
            for issue in report["issues"]:
                print(f"      {issue}")
        if failed:
            print("Invalid bundles detected", file=sys.stderr)
    return 0 if not failed else 1


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
