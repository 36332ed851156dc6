"""CLI for refsync - keep markdown link reference definitions in sync."""

import argparse
import json
import platform
import sys
from pathlib import Path
from typing import Any

from . import __version__
from .core.positions import EOL_STYLES
from .janitor import SyncReport, compute_edit, sync_vault
from .logging_config import level_for, setup_logging
from .runtime import Runtime, build_runtime


def _print_report(args: argparse.Namespace, report: SyncReport, verb: str) -> None:
    if args.json:
        output = {
            **report.counts(),
            "notes": [
                {
                    "id": r.note_id,
                    "changed": r.changed,
                    "written": r.written,
                    "error": r.error,
                }
                for r in report.results
            ],
        }
        print(json.dumps(output, indent=2))
        return

    if not args.quiet:
        for r in report.changed:
            print(f"{verb}: {r.note_id}")
    for r in report.failed:
        print(f"Error: {r.note_id}: {r.error}", file=sys.stderr)
    if not args.quiet:
        counts = report.counts()
        print(
            f"Scanned: {counts['scanned']}  Changed: {counts['changed']}  "
            f"Unchanged: {counts['unchanged']}  Failed: {counts['failed']}"
        )


def cmd_sync(args: argparse.Namespace, rt: Runtime) -> int:
    """Rewrite the autogenerated block of notes in place."""
    report = sync_vault(rt, args.ids or None, force=args.force, dry_run=args.dry_run)
    _print_report(args, report, "Would update" if args.dry_run else "Updated")
    return 1 if report.failed else 0


def cmd_check(args: argparse.Namespace, rt: Runtime) -> int:
    """Report notes whose block is out of date without writing."""
    report = sync_vault(rt, args.ids or None, dry_run=True)
    _print_report(args, report, "Out of date")
    return 1 if report.changed or report.failed else 0


def cmd_edit(args: argparse.Namespace, rt: Runtime) -> int:
    """Print the edit descriptor for one note as JSON."""
    rt.index.rebuild()
    text = sys.stdin.read() if args.stdin else None
    eol = EOL_STYLES[args.eol] if args.eol else None
    edit = compute_edit(rt, args.id, text=text, eol=eol, force=args.force)
    print(json.dumps(edit.to_dict() if edit else None, indent=2))
    return 0


def cmd_watch(args: argparse.Namespace, rt: Runtime) -> int:
    """Watch the vault and sync notes as they are saved."""
    from .watch import watch_vault

    return watch_vault(
        rt,
        debounce_ms=args.debounce_ms,
        quiet=args.quiet,
        json_output=args.json,
    )


def cmd_serve(args: argparse.Namespace, rt: Runtime) -> int:
    """Start local JSON API server."""
    import uvicorn

    from .api.app import create_app, generate_token

    token: str | None
    if args.token == "auto":
        token = generate_token()
        print(f"Generated bearer token: {token}")
        print(f"Use in requests: Authorization: Bearer {token}")
    elif args.token == "none":
        print("Warning: Running without authentication. Only use in trusted environments.")
        token = None
    else:
        token = args.token

    app = create_app(rt, token=token, enable_cors=args.cors)
    uvicorn.run(app, host=args.host, port=args.port, log_level="warning" if args.quiet else "info")
    return 0


def _version_text() -> str:
    return (
        f"refsync {__version__} "
        f"(python {platform.python_version()}, platform {sys.platform})"
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="refsync", description="Keep markdown link reference definitions in sync"
    )
    parser.add_argument("--version", action="version", version=_version_text())
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to config file (default: search cwd/refsync.toml, vault/refsync.toml)",
    )
    parser.add_argument(
        "--vault",
        type=Path,
        default=None,
        help="Path to vault directory (overrides config)",
    )
    parser.add_argument(
        "-q", "--quiet", action="store_true", help="Minimize output"
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Debug logging on stderr"
    )
    parser.add_argument(
        "--json", action="store_true", help="Machine-readable output"
    )

    subparsers = parser.add_subparsers(dest="cmd", required=True)

    # sync command
    parser_sync = subparsers.add_parser("sync", help="Update link reference blocks")
    parser_sync.add_argument("ids", nargs="*", help="Note IDs (default: all notes)")
    parser_sync.add_argument(
        "--force", action="store_true", help="Rewrite blocks that are already up to date"
    )
    parser_sync.add_argument(
        "--dry-run", action="store_true", help="Report changes without writing"
    )

    # check command
    parser_check = subparsers.add_parser(
        "check", help="Exit 1 if any link reference block is out of date"
    )
    parser_check.add_argument("ids", nargs="*", help="Note IDs (default: all notes)")

    # edit command
    parser_edit = subparsers.add_parser(
        "edit", help="Print the edit for one note as JSON (null if none)"
    )
    parser_edit.add_argument("id", help="Note ID")
    parser_edit.add_argument(
        "--stdin", action="store_true", help="Read the note text from stdin"
    )
    parser_edit.add_argument(
        "--eol", choices=sorted(EOL_STYLES), default=None,
        help="Line ending of the text (default: detect)"
    )
    parser_edit.add_argument(
        "--force", action="store_true", help="Rewrite an up-to-date block"
    )

    # watch command
    parser_watch = subparsers.add_parser("watch", help="Sync notes as they are saved")
    parser_watch.add_argument(
        "--debounce-ms", type=int, default=None,
        help="Debounce window in milliseconds (default: from config, 150)"
    )

    # serve command
    parser_serve = subparsers.add_parser("serve", help="Start local JSON API server")
    parser_serve.add_argument(
        "--host", default="127.0.0.1",
        help="Host to bind to (default: 127.0.0.1)"
    )
    parser_serve.add_argument(
        "--port", type=int, default=8766,
        help="Port to bind to (default: 8766)"
    )
    parser_serve.add_argument(
        "--token", default="auto",
        help="Bearer token (auto|<string>|none, default: auto)"
    )
    parser_serve.add_argument(
        "--cors", action="store_true",
        help="Enable CORS (default: false)"
    )

    return parser


HANDLERS: dict[str, Any] = {
    "sync": cmd_sync,
    "check": cmd_check,
    "edit": cmd_edit,
    "watch": cmd_watch,
    "serve": cmd_serve,
}


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)
    setup_logging(level_for(args.verbose, args.quiet))

    try:
        rt = build_runtime(vault_path=args.vault, config_path=args.config)
        return HANDLERS[args.cmd](args, rt)
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
