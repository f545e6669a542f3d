"""CLI entrypoints for nextpack commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .config import ConfigError
from .logging import configure_logging
from .pipeline import Packager


def _add_verbosity_options(
    parser: argparse.ArgumentParser, *, subcommand: bool = False
) -> None:
    # Subcommands must not reset values already parsed before the command name.
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=argparse.SUPPRESS if subcommand else False,
        help="Log every stub, patch and traced module.",
    )
    parser.add_argument(
        "-q",
        "--quiet",
        action="count",
        default=argparse.SUPPRESS if subcommand else 0,
        help="Only log warnings; pass twice to only log errors.",
    )


def _add_path_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Path to the Next.js project root (defaults to current directory).",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="nextpack",
        description="Compile a Next.js standalone build into a single Bun executable.",
    )
    _add_verbosity_options(parser)
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write logs to this file.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    generate_parser = subparsers.add_parser(
        "generate",
        help="Write assets.generated.js and server-entry.js without compiling.",
    )
    _add_verbosity_options(generate_parser, subcommand=True)
    _add_path_argument(generate_parser)

    build_parser = subparsers.add_parser(
        "build",
        help="Generate the entry point and compile it with bun build --compile.",
    )
    _add_verbosity_options(build_parser, subcommand=True)
    _add_path_argument(build_parser)
    build_parser.add_argument(
        "-o",
        "--outfile",
        type=Path,
        default=None,
        help="Output path for the compiled binary (defaults to <project>/server).",
    )
    build_parser.add_argument(
        "--bun-arg",
        dest="bun_args",
        action="append",
        default=[],
        metavar="ARG",
        help="Extra argument forwarded to bun build; repeatable (e.g. --bun-arg=--target=bun-linux-x64).",
    )

    context_parser = subparsers.add_parser(
        "context",
        help="Record the build context (asset prefix) next to the Next.js build output.",
    )
    _add_verbosity_options(context_parser, subcommand=True)
    _add_path_argument(context_parser)
    context_parser.add_argument(
        "--asset-prefix",
        default="",
        help="CDN prefix configured as assetPrefix; static assets are then not embedded.",
    )

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for nextpack commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(
        verbose=bool(args.verbose), quiet=int(args.quiet), log_file=args.log_file
    )

    packager = Packager(args.path)

    if args.command == "generate":
        try:
            server_root = packager.run_generate()
        except FileNotFoundError as exc:
            parser.exit(1, f"{exc}\n")
        except RuntimeError as exc:
            parser.exit(1, f"nextpack generate failed: {exc}\nRun with --verbose for more details.\n")
        print(f"Entry point generated in {_relativize(server_root)}")
    elif args.command == "build":
        try:
            outcome = packager.run_build(outfile=args.outfile, extra_args=args.bun_args)
        except FileNotFoundError as exc:
            parser.exit(1, f"{exc}\n")
        except ConfigError as exc:
            parser.exit(1, f"Invalid configuration: {exc}\n")
        except RuntimeError as exc:
            parser.exit(1, f"nextpack build failed: {exc}\nRun with --verbose for more details.\n")
        print(f"Binary written to {_relativize(outcome.binary)}")
    elif args.command == "context":
        context_path = packager.record_context(asset_prefix=args.asset_prefix)
        print(f"Build context written to {_relativize(context_path)}")
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _relativize(path: Path) -> str:
    try:
        return str(path.relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
