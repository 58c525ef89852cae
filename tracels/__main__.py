"""CLI entry point for tracels."""
from __future__ import annotations

import argparse
import sys

from tracels.trace import Context

VERSION = "0.1.0"
KNOWN_COMMANDS = {"ls"}


class _Parser(argparse.ArgumentParser):
    """Print full help on bad arguments and exit with status 1."""

    def __init__(self, *args, **kwargs):
        # Long options must be spelled out in full
        kwargs.setdefault("allow_abbrev", False)
        super().__init__(*args, **kwargs)

    def error(self, message):
        self.print_help(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


def _build_parser() -> argparse.ArgumentParser:
    # Shared global options, accepted before or after the subcommand.
    # SUPPRESS keeps a subcommand's defaults from clobbering earlier values.
    global_opts = _Parser(add_help=False)
    global_opts.add_argument("--format", "-f", choices=["human", "json"],
                             default=argparse.SUPPRESS, help="Output format (default: human)")
    global_opts.add_argument("--color", action="store_true", default=argparse.SUPPRESS,
                             help="Force color output (for piping to less -R)")

    parser = _Parser(
        prog="tracels",
        description="List recorded traces",
        parents=[global_opts],
    )
    parser.add_argument("--version", action="version", version=f"tracels {VERSION}")

    sub = parser.add_subparsers(dest="command")

    p_ls = sub.add_parser(
        "ls", parents=[global_opts], help="List traces",
        description="List the traces in DIR (default: the trace save directory)",
    )
    p_ls.add_argument("-l", "--long-listing", action="store_true",
                      help="Long listing: name, start time, duration, size, command line")
    p_ls.add_argument("-t", "--sort-by-age", action="store_true",
                      help="Sort by start time, oldest first")
    p_ls.add_argument("-r", "--reverse", action="store_true",
                      help="Reverse the sort order")
    p_ls.add_argument("trace_dir", nargs="?", metavar="DIR", help="Trace directory")

    return parser


def _has_command(argv: list[str]) -> bool:
    """True if the first non-option token names a subcommand."""
    skip = False
    for tok in argv:
        if skip:
            skip = False
            continue
        if tok in ("--format", "-f"):
            skip = True
            continue
        if tok.startswith("-"):
            continue
        return tok in KNOWN_COMMANDS
    return False


def main(argv: list[str] | None = None, context: Context | None = None) -> int:
    if argv is None:
        argv = sys.argv[1:]
    if context is None:
        context = Context.from_environ()

    from tracels.formatters.human import init as init_human, print_error

    if context.nested:
        print_error("tracels: cannot run tracels inside a replay session. Exiting.")
        return 1

    # Bare `tracels [DIR]` means `tracels ls [DIR]`
    if not _has_command(argv) and argv[:1] not in (["-h"], ["--help"], ["--version"]):
        argv = ["ls"] + argv

    parser = _build_parser()
    args = parser.parse_args(argv)

    init_human(force_color=getattr(args, "color", False))

    # argv always names `ls` by now
    from tracels.commands.ls import SortOrder, run_ls
    trace_dir = args.trace_dir if args.trace_dir else context.trace_save_dir
    return run_ls(
        trace_dir,
        order=SortOrder.BY_AGE if args.sort_by_age else SortOrder.BY_NAME,
        reverse=args.reverse,
        long_listing=args.long_listing,
        fmt=getattr(args, "format", "human"),
    )


if __name__ == "__main__":
    sys.exit(main())
