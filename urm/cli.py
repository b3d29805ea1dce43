import argparse
import logging
import sys
from typing import List, Optional

from . import __version__
from .errors import ParseError, URMRuntimeError
from .machine import DEFAULTS, format_trace, listing, run
from .parser import parse_file

EXIT_OK = 0
EXIT_PARSE_ERROR = 1
EXIT_USAGE = 2       # argparse's own exit status
EXIT_RUNTIME_ERROR = 3
EXIT_IO_ERROR = 4

LOG_FORMAT = "%(levelname)s:%(name)s:%(message)s"


def natural(text: str) -> int:
    try:
        value = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not an integer: {text!r}")
    if value < 0:
        raise argparse.ArgumentTypeError(f"must be non-negative: {value}")
    return value


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="urm", description="Unlimited Register Machine interpreter")
    ap.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    ap.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = ap.add_subparsers(dest="command", required=True)

    rp = sub.add_parser("run", help="Run a program and print its output register")
    rp.add_argument("program", help="Path to a .urm program")
    rp.add_argument("inputs", nargs="*", type=natural, help="Initial values of the in(...) registers")
    rp.add_argument("--debug", action="store_true", help="Print a trace line per executed instruction")
    rp.add_argument("--max-steps", type=natural, default=DEFAULTS['max_steps'],
                    help="Fail after this many steps (default: unbounded)")

    cp = sub.add_parser("check", help="Parse a program and print its listing")
    cp.add_argument("program", help="Path to a .urm program")
    cp.add_argument("--pc", type=natural, help="Mark this line and show only the lines around it")
    cp.add_argument("--context", type=natural,
                    help=f"Lines shown either side of --pc (default: {DEFAULTS['listing_context']})")
    return ap


def _error(message: str) -> None:
    print(f"error: {message}", file=sys.stderr)


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING, format=LOG_FORMAT)

    try:
        program = parse_file(args.program)
    except OSError as e:
        _error(f"cannot read {args.program}: {e.strerror or e}")
        return EXIT_IO_ERROR
    except UnicodeDecodeError as e:
        _error(f"cannot decode {args.program}: {e}")
        return EXIT_IO_ERROR
    except ParseError as e:
        _error(str(e))
        return EXIT_PARSE_ERROR

    if args.command == "check":
        print(listing(program, pc=args.pc, context=args.context))
        return EXIT_OK

    try:
        result = run(program, args.inputs, debug=args.debug, max_steps=args.max_steps)
    except URMRuntimeError as e:
        _error(str(e))
        return EXIT_RUNTIME_ERROR

    if args.debug:
        print(format_trace(result.trace))
    print(result.output)
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
