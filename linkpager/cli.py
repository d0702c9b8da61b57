"""CLI entry point: argparse dispatcher for the serve and check commands."""
from __future__ import annotations

import argparse
import json
import sys
import traceback

from ._version import __version__
from .logger import ConfigurationError, LinkPagerError, SourceReadError, get_logger

logger = get_logger("linkpager.cli")


# ---------------------------------------------------------------------------
# Shared argparse helpers
# ---------------------------------------------------------------------------
def _add_source_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--filename", help="File to read link entries from (env LINKPAGER_FILENAME)")
    p.add_argument("--per-page", type=int, default=None,
                   help="Number of links to show per page (default 10, env LINKPAGER_PER_PAGE)")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="linkpager",
        description="Serve a links file as paginated HTML, reloading it when it changes",
    )
    parser.add_argument("--debug", action="store_true", help="Show stack traces on error")
    parser.add_argument("-v", "--version", action="version", version=f"%(prog)s {__version__}")
    sub = parser.add_subparsers(dest="command", required=True)

    # serve
    p = sub.add_parser("serve", help="Run the HTTP server and watch the links file",
                       description="Run the HTTP server. The --filename, --per-page, --listen-addr "
                                   "and --template-dir flags go after the subcommand name, "
                                   "e.g. linkpager serve --filename links.txt.")
    _add_source_args(p)
    p.add_argument("--listen-addr", default=None,
                   help="Address to listen on (default 127.0.0.1:3032, env LINKPAGER_LISTEN_ADDR)")
    p.add_argument("--template-dir", default=None,
                   help="Directory to load templates from (default: bundled templates)")
    p.add_argument("--polling", action="store_true", default=None,
                   help="Use a polling observer instead of native notifications")

    # check
    p = sub.add_parser("check", help="Parse the links file once and report counts")
    _add_source_args(p)

    return parser


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------
def reload_from_watch(store) -> None:
    """Watcher callback: reload, keeping the old list if the file is unreadable."""
    try:
        store.reload()
    except SourceReadError as exc:
        logger.warning("Error while reloading the links file, keeping previous entries: %s", exc)


def cmd_serve(args: argparse.Namespace) -> None:
    import uvicorn

    from .config import load_settings
    from .store import EntryStore
    from .watch_core import FileWatcher
    from .web import create_app

    settings = load_settings(
        filename=args.filename,
        per_page=args.per_page,
        listen_addr=args.listen_addr,
        template_dir=args.template_dir,
    )
    store = EntryStore(settings.filename, settings.per_page)
    watcher = FileWatcher(settings.filename, lambda: reload_from_watch(store), use_polling=args.polling)
    watcher.start()
    try:
        app = create_app(store, settings.template_dir)
        logger.info(f"Starting linkpager on {settings.listen_addr}")
        logger.info(f"Links file: {settings.filename} ({store.count} entries, {settings.per_page} per page)")
        uvicorn.run(
            app,
            host=settings.host,
            port=settings.port,
            log_level="info",
            access_log=True,
        )
    finally:
        watcher.stop()


def cmd_check(args: argparse.Namespace) -> None:
    from .config import resolve_source
    from .store import EntryStore

    filename, per_page = resolve_source(args.filename, args.per_page)
    store = EntryStore(filename, per_page)
    json.dump(
        {
            "ok": True,
            "filename": str(store.source),
            "entries": store.count,
            "skipped": store.skipped,
            "pages": store.page_count,
        },
        sys.stdout,
    )
    sys.stdout.write("\n")


COMMANDS = {
    "serve": cmd_serve,
    "check": cmd_check,
}


# ---------------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------------
def main(argv=None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    fn = COMMANDS.get(args.command)
    if fn is None:
        parser.print_help()
        sys.exit(1)

    try:
        fn(args)
    except KeyboardInterrupt:
        sys.exit(130)
    except ConfigurationError as exc:
        # argparse prints usage and exits with status 2
        parser.error(str(exc))
    except LinkPagerError as exc:
        logger.error(f"{args.command} failed: {exc}")
        if args.debug:
            traceback.print_exc(file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
