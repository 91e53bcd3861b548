#!/usr/bin/env python3
"""Entry point for the scaffold CLI."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from textwrap import dedent
from typing import Any, Dict, Iterable

from scaffoldkit import __version__
from scaffoldkit.adapters.cmis_browser import CmisBrowserSession
from scaffoldkit.adapters.digest import HashlibDigestProvider
from scaffoldkit.adapters.fs_template_repo import FSTemplateRepository, load_manifest_file
from scaffoldkit.adapters.local_content import LocalContentSession
from scaffoldkit.app.manifest import iter_template_errors, iter_view_errors
from scaffoldkit.app.materialize import ConflictPolicy
from scaffoldkit.app.scaffold import ScaffoldService
from scaffoldkit.app.smoke import SmokeCheckService
from scaffoldkit.domain.errors import ScaffoldError
from scaffoldkit.domain.template import TemplateDescriptor
from scaffoldkit.domain.view import ViewDescriptor
from scaffoldkit.plugins.loader import load_plugins
from scaffoldkit.resources import sync_packaged_templates
from scaffoldkit.settings import SETTINGS
from scaffoldkit.utils.telemetry import clear as telemetry_clear
from scaffoldkit.utils.telemetry import iter_events as telemetry_iter
from scaffoldkit.utils.telemetry import record_event, summarize as telemetry_summarize

HELP_OVERVIEW = dedent(
    """
    Quick start:
      - scaffold templates list
      - scaffold generate template-mobile-hello-world ./my-app --param fileName=MyApp

    Templates live under the scaffoldkit home (SCAFFOLDKIT_HOME, default ~/.scaffoldkit);
    pass --root to work with another template directory.
    """
)


def _emit(payload: Any) -> None:
    print(json.dumps(payload, ensure_ascii=False, indent=2))


def _fail(exc: Exception) -> int:
    print(f"scaffold error: {exc}", file=sys.stderr)
    return 1


def _build_service(root: str | None = None) -> ScaffoldService:
    if root:
        template_root = Path(root).expanduser().resolve()
    else:
        template_root = SETTINGS.template_dir
        sync_packaged_templates(template_root)
    repository = FSTemplateRepository(template_root)
    plugins = load_plugins(SETTINGS)
    return ScaffoldService(
        repository,
        SETTINGS,
        extra_templates=dict(plugins.templates()),
        extra_views=dict(plugins.views()),
    )


def _warn_skipped(service: ScaffoldService) -> None:
    for skipped in service.skipped:
        print(f"scaffold warning: skipped {skipped.kind} {skipped.descriptor_id}: {skipped.message}", file=sys.stderr)


def _parse_params(items: Iterable[str] | None) -> Dict[str, str]:
    params: Dict[str, str] = {}
    for item in items or []:
        if "=" not in item:
            raise ValueError(f"parameter must be KEY=VALUE, got '{item}'")
        key, value = item.split("=", 1)
        key = key.strip()
        if not key:
            raise ValueError(f"parameter key missing in '{item}'")
        params[key] = value
    return params


def _print_template(template_id: str, descriptor: TemplateDescriptor) -> None:
    print(f"{template_id}\t{descriptor.name}")
    if descriptor.description:
        print(f"  {descriptor.description}")
    for index, source in enumerate(descriptor.sources):
        print(f"  [{index}] {source.action.value:<8} {source.location} -> {source.rename}")
    for parameter in descriptor.parameters:
        default = f" (default: {parameter.default_value})" if parameter.default_value is not None else ""
        print(f"  param {parameter.key}{default}")


def _print_view(view: ViewDescriptor) -> None:
    print(f"{view.id}\t{view.label} [{view.factory} @ {view.region}]")
    print(f"  {view.link}")


def _templates_cmd(args: argparse.Namespace) -> int:
    as_json = bool(getattr(args, "json", False))
    try:
        service = _build_service(args.root)
        if args.templates_command == "list":
            summaries = service.list_templates()
            payload = [summary.as_dict() for summary in summaries]
            _warn_skipped(service)
            record_event(SETTINGS, "templates.list", {"count": len(payload), "skipped": len(service.skipped)})
            if as_json:
                _emit(payload)
            elif not payload:
                print("No templates installed")
            else:
                for item in payload:
                    print(f"{item['id']}\t{item['name']} ({item['actions']} actions)")
                    if item["description"]:
                        print(f"  {item['description']}")
            return 0
        descriptor = service.describe(args.template_id)
    except ScaffoldError as exc:
        return _fail(exc)
    if as_json:
        _emit({"id": args.template_id, **descriptor.as_dict()})
    else:
        _print_template(args.template_id, descriptor)
    return 0


def _views_cmd(args: argparse.Namespace) -> int:
    as_json = bool(getattr(args, "json", False))
    try:
        service = _build_service(args.root)
        if args.views_command == "list":
            views = service.list_views()
            _warn_skipped(service)
            record_event(SETTINGS, "views.list", {"count": len(views), "skipped": len(service.skipped)})
        else:
            views = [service.view(args.view_id)]
    except ScaffoldError as exc:
        return _fail(exc)
    if as_json:
        payload = [view.as_dict() for view in views]
        _emit(payload if args.views_command == "list" else payload[0])
    elif not views:
        print("No views installed")
    else:
        for view in views:
            _print_view(view)
    return 0


def _generate_cmd(args: argparse.Namespace) -> int:
    try:
        params = _parse_params(args.params)
    except ValueError as exc:
        print(f"scaffold error: {exc}", file=sys.stderr)
        return 2
    destination = Path(args.destination).expanduser()
    try:
        service = _build_service(args.root)
        report = service.generate(
            args.template_id,
            destination,
            params,
            conflict=ConflictPolicy(args.on_conflict),
        )
    except ScaffoldError as exc:
        return _fail(exc)
    if args.json:
        _emit(report.as_dict())
    else:
        print(f"Generated {report.template} -> {report.destination_root}")
        for relative, item in zip(report.relative_paths(), report.files):
            print(f"  {item.action.value:<8} {relative} ({item.size_bytes} bytes)")
    return 0


def _validate_cmd(args: argparse.Namespace) -> int:
    path = Path(args.file).expanduser()
    kind = args.kind or ("view" if path.name.startswith("view.") else "template")
    try:
        data = load_manifest_file(path)
    except ScaffoldError as exc:
        return _fail(exc)
    iterator = iter_view_errors if kind == "view" else iter_template_errors
    issues = [{"path": where or "<root>", "message": message} for where, message in iterator(data)]
    if not issues:
        build = ViewDescriptor.from_dict if kind == "view" else TemplateDescriptor.from_dict
        try:
            build(data)
        except ScaffoldError as exc:
            issues.append({"path": "<root>", "message": exc.message})
    record_event(SETTINGS, "validate", {"kind": kind, "issues": len(issues)})
    if args.json:
        _emit({"file": str(path), "kind": kind, "valid": not issues, "issues": issues})
    elif issues:
        print(f"{path}: {len(issues)} issue(s)")
        for issue in issues:
            print(f"  {issue['path']}: {issue['message']}")
    else:
        print(f"{path}: valid {kind}")
    return 0 if not issues else 1


def _smoke_cmd(args: argparse.Namespace) -> int:
    session_provider = None
    if args.cmis_url:
        auth = None
        if args.user:
            auth = (args.user, args.password or "")
        cmis_url = args.cmis_url
        repository_id = args.repository

        def session_provider() -> CmisBrowserSession:
            return CmisBrowserSession(cmis_url, repository_id=repository_id, auth=auth)

    elif args.content_root:
        content_root = Path(args.content_root)

        def session_provider() -> LocalContentSession:
            return LocalContentSession(content_root)

    service = SmokeCheckService(session_provider=session_provider, digest=HashlibDigestProvider())
    results = service.run()
    failed = [result for result in results if result.status == "failed"]
    record_event(
        SETTINGS,
        "smoke.run",
        {"checks": len(results), "failed": len(failed)},
        status="error" if failed else "ok",
        level="warn" if failed else "info",
    )
    if args.json:
        _emit([result.as_dict() for result in results])
    else:
        for result in results:
            detail = f" - {result.detail}" if result.detail else ""
            print(f"{result.status.upper():<8} {result.name}{detail}")
    return 1 if failed else 0


def _telemetry_cmd(args: argparse.Namespace) -> int:
    if args.telemetry_command == "report":
        events = list(telemetry_iter(SETTINGS))
        recent = getattr(args, "recent", 0)
        if recent and recent > 0:
            events = events[-recent:]
        summary = telemetry_summarize(events)
        if args.json:
            _emit({"summary": summary, "events": events if recent else []})
        else:
            print(f"Events: {summary['total']}")
            for name, count in sorted(summary["by_event"].items()):
                print(f"  {name}: {count}")
            for event in events if recent else []:
                print(f"  - {event.get('event')} {event.get('status', '')}".rstrip())
        return 0
    telemetry_clear(SETTINGS)
    print("Telemetry cleared")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="scaffold",
        description=HELP_OVERVIEW,
        formatter_class=argparse.RawTextHelpFormatter,
    )
    parser.add_argument("--version", action="version", version=f"scaffold {__version__}")

    sub = parser.add_subparsers(dest="command", required=True)

    templates_cmd = sub.add_parser("templates", help="Inspect installed templates")
    templates_sub = templates_cmd.add_subparsers(dest="templates_command", required=True)
    templates_list = templates_sub.add_parser("list", help="List available templates")
    templates_list.add_argument("--root", help="Template directory (default: scaffoldkit home)")
    templates_list.add_argument("--json", action="store_true", help="Emit machine-readable JSON")
    templates_list.set_defaults(func=_templates_cmd)
    templates_show = templates_sub.add_parser("show", help="Show the manifest of a template")
    templates_show.add_argument("template_id", help="Template identifier")
    templates_show.add_argument("--root", help="Template directory (default: scaffoldkit home)")
    templates_show.add_argument("--json", action="store_true", help="Emit machine-readable JSON")
    templates_show.set_defaults(func=_templates_cmd)

    generate_cmd = sub.add_parser("generate", help="Materialize a template into a directory")
    generate_cmd.add_argument("template_id", help="Template identifier")
    generate_cmd.add_argument("destination", help="Destination directory")
    generate_cmd.add_argument(
        "--param",
        dest="params",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Template parameter (repeatable)",
    )
    generate_cmd.add_argument(
        "--on-conflict",
        choices=[policy.value for policy in ConflictPolicy],
        default=ConflictPolicy.OVERWRITE.value,
        help="What to do when a destination file already exists (default: overwrite)",
    )
    generate_cmd.add_argument("--root", help="Template directory (default: scaffoldkit home)")
    generate_cmd.add_argument("--json", action="store_true", help="Emit machine-readable JSON")
    generate_cmd.set_defaults(func=_generate_cmd)

    views_cmd = sub.add_parser("views", help="Inspect view descriptors")
    views_sub = views_cmd.add_subparsers(dest="views_command", required=True)
    views_list = views_sub.add_parser("list", help="List view descriptors")
    views_list.add_argument("--root", help="Template directory (default: scaffoldkit home)")
    views_list.add_argument("--json", action="store_true", help="Emit machine-readable JSON")
    views_list.set_defaults(func=_views_cmd)
    views_show = views_sub.add_parser("show", help="Show a view descriptor")
    views_show.add_argument("view_id", help="View identifier")
    views_show.add_argument("--root", help="Template directory (default: scaffoldkit home)")
    views_show.add_argument("--json", action="store_true", help="Emit machine-readable JSON")
    views_show.set_defaults(func=_views_cmd)

    validate_cmd = sub.add_parser("validate", help="Validate a template manifest or view descriptor file")
    validate_cmd.add_argument("file", help="Path to template.yaml/json or view.yaml/json")
    validate_cmd.add_argument("--kind", choices=["template", "view"], help="Manifest kind (default: from file name)")
    validate_cmd.add_argument("--json", action="store_true", help="Emit machine-readable JSON")
    validate_cmd.set_defaults(func=_validate_cmd)

    smoke_cmd = sub.add_parser("smoke", help="Run smoke checks against content and digest services")
    source = smoke_cmd.add_mutually_exclusive_group()
    source.add_argument("--cmis-url", help="CMIS browser binding service URL")
    source.add_argument("--content-root", help="Local directory acting as the content root folder")
    smoke_cmd.add_argument("--repository", help="CMIS repository id (default: first repository)")
    smoke_cmd.add_argument("--user", help="CMIS user name")
    smoke_cmd.add_argument("--password", help="CMIS password")
    smoke_cmd.add_argument("--json", action="store_true", help="Emit machine-readable JSON")
    smoke_cmd.set_defaults(func=_smoke_cmd)

    telemetry_cmd = sub.add_parser("telemetry", help="Inspect the local telemetry log")
    telemetry_sub = telemetry_cmd.add_subparsers(dest="telemetry_command", required=True)
    telemetry_report = telemetry_sub.add_parser("report", help="Summarize recorded events")
    telemetry_report.add_argument("--recent", type=int, default=0, help="Also list the N most recent events")
    telemetry_report.add_argument("--json", action="store_true", help="Emit machine-readable JSON")
    telemetry_report.set_defaults(func=_telemetry_cmd)
    telemetry_clear_cmd = telemetry_sub.add_parser("clear", help="Delete the telemetry log")
    telemetry_clear_cmd.set_defaults(func=_telemetry_cmd)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
