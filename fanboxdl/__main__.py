from __future__ import annotations

import argparse
import logging
import os
import sys

from .context import FanboxContext
from .exceptions import InitError, map_exception_to_exit_code
from .fanboxloader import FanboxLoader
from .ui import NullSink, RichSink

SESSION_ENV = "FANBOXSESSID"
LOG_LEVEL_ENV = "FANBOXDL_LOG"

logger = logging.getLogger("fanboxdl")


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="fanboxdl")
    parser.add_argument(
        "session_id", nargs="?", default=os.environ.get(SESSION_ENV),
        help=f"FANBOXSESSID cookie value (default: ${SESSION_ENV})",
    )
    parser.add_argument("-c", "--creator-id", required=True)
    parser.add_argument("-d", "--dest-dir", default=".")
    parser.add_argument("--connect-timeout", type=float, default=5.0)
    parser.add_argument("--request-timeout", type=float, default=20.0)
    parser.add_argument("-v", "--verbose", action="store_true")

    args = parser.parse_args(argv)

    if args.connect_timeout <= 0:
        parser.error("--connect-timeout must be > 0")
    if args.request_timeout <= 0:
        parser.error("--request-timeout must be > 0")

    return args


def _log_level(verbose: bool) -> int:
    if verbose:
        return logging.DEBUG
    name = os.environ.get(LOG_LEVEL_ENV, "").upper()
    if not name:
        return logging.INFO
    level = logging.getLevelName(name)
    if not isinstance(level, int):
        raise InitError(f"invalid ${LOG_LEVEL_ENV}: {name!r}")
    return level


def main(argv: list[str] | None = None) -> int:
    sink: NullSink | RichSink | None = None

    try:
        args = parse_args(argv)
        level = _log_level(args.verbose)

        if sys.stderr.isatty():
            from rich.console import Console
            from rich.logging import RichHandler

            console = Console(stderr=True)
            sink = RichSink(console)
            logging.basicConfig(
                handlers=[RichHandler(console=console, show_path=False)],
                level=level,
                format="%(message)s",
            )
        else:
            sink = NullSink()
            logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")

        if not args.session_id:
            raise InitError(f"missing session id: pass it as an argument or set ${SESSION_ENV}")

        context = FanboxContext(
            args.session_id,
            connect_timeout=args.connect_timeout,
            request_timeout=args.request_timeout,
        )
        loader = FanboxLoader(context, output_dir=args.dest_dir, progress=sink)
        loader.download_creator(args.creator_id)
        return 0

    except KeyboardInterrupt:
        return map_exception_to_exit_code(KeyboardInterrupt())
    except SystemExit as exc:
        code = exc.code if isinstance(exc.code, int) else 2
        return 0 if code == 0 else 2
    except Exception as exc:
        logger.error("%s", exc, exc_info=logger.isEnabledFor(logging.DEBUG))
        return map_exception_to_exit_code(exc)
    finally:
        if sink is not None:
            sink.close()


if __name__ == "__main__":
    sys.exit(main())
