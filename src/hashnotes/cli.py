"""CLI for hashnotes - short local notes with deep-linkable selection."""

import argparse
import json
import logging
import platform
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from . import __version__
from .adapters.history_router import HistoryRouter
from .core.model import THEMES, Note
from .core.route import EMPTY_ROUTE
from .runtime import Runtime, Session, build_runtime


def open_session(rt: Runtime, route: str = EMPTY_ROUTE) -> Session:
    """Open a session whose pending writes are flushed when it closes."""
    return Session(rt, router=HistoryRouter(route), flush_on_close=True)


def note_dict(note: Note) -> dict[str, Any]:
    return note.to_record()


def format_time(ms: int) -> str:
    return datetime.fromtimestamp(ms / 1000, tz=timezone.utc).strftime("%Y-%m-%d %H:%M")


def print_note(note: Note) -> None:
    print(f"id:      {note.id}")
    print(f"title:   {note.title or '(untitled)'}")
    print(f"updated: {format_time(note.updated_at)}")
    print()
    print(note.content)


def read_value(value: str | None) -> str | None:
    """`-` reads the value from stdin."""
    if value == "-":
        return sys.stdin.read()
    return value


def cmd_new(args: argparse.Namespace, rt: Runtime) -> int:
    """Create a new note."""
    with open_session(rt) as session:
        nid = session.store.add()
        title = read_value(args.title)
        content = read_value(args.content)
        if title is not None or content is not None:
            session.store.update(nid, title=title, content=content)
        note = session.store.get(nid)

    if args.json:
        print(json.dumps(note_dict(note)))
    elif not args.quiet:
        print(nid)
    return 0


def cmd_ls(args: argparse.Namespace, rt: Runtime) -> int:
    """List notes, newest first, optionally filtered."""
    with open_session(rt) as session:
        notes = session.store.search(args.query or "")
        selected = session.store.selected_id

    if args.json:
        print(json.dumps([note_dict(n) for n in notes], indent=2))
        return 0

    for note in notes:
        marker = "*" if note.id == selected else " "
        title = note.title or "(untitled)"
        print(f"{marker} {note.id}  {format_time(note.updated_at)}  {title}")
    if not args.quiet:
        print(f"{len(notes)} note(s)", file=sys.stderr)
    return 0


def cmd_show(args: argparse.Namespace, rt: Runtime) -> int:
    """Print one note."""
    with open_session(rt) as session:
        note = session.store.get(args.id)

    if note is None:
        print(f"Note {args.id} not found", file=sys.stderr)
        return 1
    if args.json:
        print(json.dumps(note_dict(note)))
    else:
        print_note(note)
    return 0


def cmd_edit(args: argparse.Namespace, rt: Runtime) -> int:
    """Replace the title and/or content of a note."""
    title = read_value(args.title)
    content = read_value(args.content)
    if title is None and content is None:
        print("Nothing to change: pass --title and/or --content", file=sys.stderr)
        return 1

    with open_session(rt) as session:
        if args.id not in session.store:
            print(f"Note {args.id} not found", file=sys.stderr)
            return 1
        session.store.update(args.id, title=title, content=content)
        note = session.store.get(args.id)

    if args.json:
        print(json.dumps(note_dict(note)))
    elif not args.quiet:
        print(f"Updated {note.id}")
    return 0


def cmd_rm(args: argparse.Namespace, rt: Runtime) -> int:
    """Delete a note."""
    with open_session(rt) as session:
        if args.id not in session.store:
            print(f"Note {args.id} not found", file=sys.stderr)
            return 1
        session.store.delete(args.id)

    if not args.quiet:
        print(f"Deleted {args.id}")
    return 0


def cmd_open(args: argparse.Namespace, rt: Runtime) -> int:
    """Resolve a deep link the way the app does on startup."""
    with open_session(rt, route=args.fragment) as session:
        route = session.router.read()
        note = session.store.selected_note

    if args.json:
        print(json.dumps({"route": route, "note": note_dict(note) if note else None}))
        return 0

    print(f"route:   {route}")
    if note is None:
        print("No note selected")
        return 0
    print_note(note)
    return 0


def cmd_theme(args: argparse.Namespace, rt: Runtime) -> int:
    """Show or change the theme preference."""
    if args.value == "toggle":
        theme = rt.themes.toggle_theme()
    elif args.value:
        rt.themes.save_theme(args.value)
        theme = rt.themes.load_theme()
    else:
        theme = rt.themes.load_theme()

    if args.json:
        print(json.dumps({"theme": theme}))
    else:
        print(theme)
    return 0


def cmd_serve(args: argparse.Namespace, rt: Runtime) -> int:
    """Start local JSON API server."""
    try:
        import uvicorn

        from .api.app import create_app
    except ImportError as e:
        print(
            "Error: API dependencies not installed. "
            "Install with: pip install hashnotes[api]",
            file=sys.stderr
        )
        print(f"Details: {e}", file=sys.stderr)
        return 1

    host = args.host or rt.config.api.host
    port = args.port or rt.config.api.port
    app = create_app(rt, enable_cors=args.cors)

    print(f"Starting server on http://{host}:{port}")
    uvicorn.run(app, host=host, port=port, log_level="info")
    return 0


def version_text() -> str:
    return (
        f"hashnotes {__version__}\n"
        f"python {platform.python_version()}\n"
        f"platform {platform.platform()}"
    )


def main() -> None:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="hashnotes",
        description="Hashnotes CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--version", action="version", version=version_text()
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to config file (default: search cwd/hashnotes.toml, root/hashnotes.toml)",
    )
    parser.add_argument(
        "--root",
        type=Path,
        default=None,
        help="Path to storage directory (overrides config)",
    )
    parser.add_argument(
        "-q", "--quiet", action="store_true", help="Minimize output"
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Debug logging"
    )
    parser.add_argument(
        "--json", action="store_true", help="Machine-readable output"
    )

    subparsers = parser.add_subparsers(dest="cmd", required=True)

    parser_new = subparsers.add_parser("new", help="Create a new note")
    parser_new.add_argument("--title", help="Note title ('-' reads stdin)")
    parser_new.add_argument("--content", help="Note content ('-' reads stdin)")

    parser_ls = subparsers.add_parser("ls", help="List notes")
    parser_ls.add_argument("--query", "-s", help="Case-insensitive filter on title and content")

    parser_show = subparsers.add_parser("show", help="Print a note")
    parser_show.add_argument("id", help="Note ID")

    parser_edit = subparsers.add_parser("edit", help="Change a note")
    parser_edit.add_argument("id", help="Note ID")
    parser_edit.add_argument("--title", help="New title ('-' reads stdin)")
    parser_edit.add_argument("--content", help="New content ('-' reads stdin)")

    parser_rm = subparsers.add_parser("rm", help="Delete a note")
    parser_rm.add_argument("id", help="Note ID")

    parser_open = subparsers.add_parser("open", help="Resolve a #/note/<id> deep link")
    parser_open.add_argument("fragment", help="URL fragment, e.g. '#/note/abc'")

    parser_theme = subparsers.add_parser("theme", help="Show or set the theme")
    parser_theme.add_argument(
        "value", nargs="?", choices=[*THEMES, "toggle"], help="New theme"
    )

    parser_serve = subparsers.add_parser("serve", help="Start local JSON API server")
    parser_serve.add_argument("--host", default=None, help="Bind host (default from config)")
    parser_serve.add_argument("--port", type=int, default=None, help="Bind port (default from config)")
    parser_serve.add_argument("--cors", action="store_true", help="Enable CORS")

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    rt = build_runtime(root=args.root, config_path=args.config)

    handlers = {
        "new": cmd_new,
        "ls": cmd_ls,
        "show": cmd_show,
        "edit": cmd_edit,
        "rm": cmd_rm,
        "open": cmd_open,
        "theme": cmd_theme,
        "serve": cmd_serve,
    }
    handler = handlers.get(args.cmd)

    if handler:
        try:
            exit_code = handler(args, rt)
            sys.exit(exit_code)
        except Exception as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)
    else:
        print(f"Unknown command: {args.cmd}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
