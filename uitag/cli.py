"""CLI entrypoints for uitag commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Iterable

from .config import ConfigError
from .logging import configure_logging
from .models import Diagnostic
from .naming.resolver import NamingError
from .orchestrator import Orchestrator
from .parsing.tree_sitter import SourceParseFailure
from .validators.base import ValidationError


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _add_log_file_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    parser.add_argument(
        "--log-file",
        type=Path,
        default=argparse.SUPPRESS if suppress_default else None,
        help="Also write DEBUG-level logs to this file.",
    )


def _add_path_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Path to the repository root (defaults to current directory).",
    )


def _add_workers_option(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Number of files to analyse in parallel (defaults to the config value).",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="uitag",
        description="Assign stable identifier attributes to UI components and generate their selectors.",
    )
    _add_verbose_option(parser)
    _add_log_file_option(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    inject_parser = subparsers.add_parser(
        "inject",
        help="Insert missing identifier attributes into component sources.",
    )
    _add_verbose_option(inject_parser, suppress_default=True)
    _add_log_file_option(inject_parser, suppress_default=True)
    _add_path_argument(inject_parser)
    inject_parser.add_argument(
        "--check",
        action="store_true",
        help="Report components that still need an identifier without writing files.",
    )
    inject_parser.add_argument(
        "--no-stage",
        action="store_true",
        help="Do not git-add the files that were changed.",
    )
    _add_workers_option(inject_parser)

    generate_parser = subparsers.add_parser(
        "generate",
        help="Regenerate the selector stylesheet from the identifiers in the tree.",
    )
    _add_verbose_option(generate_parser, suppress_default=True)
    _add_log_file_option(generate_parser, suppress_default=True)
    _add_path_argument(generate_parser)
    generate_parser.add_argument(
        "--check",
        action="store_true",
        help="Fail when the generated stylesheet is missing or stale; write nothing.",
    )
    _add_workers_option(generate_parser)

    resolve_parser = subparsers.add_parser(
        "resolve",
        help="Print the identifier assigned to one exported component.",
    )
    _add_verbose_option(resolve_parser, suppress_default=True)
    _add_log_file_option(resolve_parser, suppress_default=True)
    resolve_parser.add_argument("file", help="Component file path, relative to the repository root.")
    resolve_parser.add_argument("export", help="Export name, or 'default' for the default export.")

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for uitag commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose), log_file=args.log_file)

    orchestrator = Orchestrator()

    if args.command == "inject":
        check = bool(getattr(args, "check", False))
        try:
            outcome = orchestrator.run_inject(
                args.path,
                check=check,
                stage=False if args.no_stage else None,
                workers=args.workers,
            )
        except SourceParseFailure as exc:
            parser.exit(1, _format_failure("uitag inject aborted", exc.diagnostics))
        except (FileNotFoundError, ConfigError) as exc:
            parser.exit(1, f"{exc}\n")
        except RuntimeError as exc:
            parser.exit(1, f"uitag inject failed: {exc}\nRun with --verbose for more details.\n")
        report = outcome.report
        if not report.ok:
            parser.exit(1, _format_failure("uitag inject found problems", report.diagnostics))
        if check:
            print("All components carry identifiers")
        elif report.changed_files:
            for rel_path in report.changed_files:
                print(f"updated {rel_path}")
            if outcome.staged:
                print(f"Staged {len(outcome.staged)} file(s)")
        else:
            print("Identifiers already up to date")
    elif args.command == "generate":
        check = bool(getattr(args, "check", False))
        try:
            outcome = orchestrator.run_generate(args.path, check=check, workers=args.workers)
        except SourceParseFailure as exc:
            parser.exit(1, _format_failure("uitag generate aborted", exc.diagnostics))
        except ValidationError as exc:
            parser.exit(1, _format_failure(f"uitag generate aborted: {exc}", exc.diagnostics))
        except (FileNotFoundError, ConfigError) as exc:
            parser.exit(1, f"{exc}\n")
        except RuntimeError as exc:
            parser.exit(1, f"uitag generate failed: {exc}\nRun with --verbose for more details.\n")
        result = outcome.result
        generated = _relativize(result.generated_path)
        if check:
            if result.stale:
                parser.exit(1, f"{generated} is stale; run `uitag generate`\n")
            print(f"{generated} is up to date")
        else:
            state = "written" if result.written else "unchanged"
            print(f"{generated} {state} ({result.selector_count} selectors, sha256:{result.content_hash[:12]})")
            if result.custom_created:
                print(f"Created {_relativize(result.custom_path)}")
    elif args.command == "resolve":
        try:
            identifier = orchestrator.resolve(args.file, args.export)
        except NamingError as exc:
            parser.exit(1, f"{args.file}#{args.export}: [{exc.code}] {exc}\n")
        print(identifier)
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _format_failure(headline: str, diagnostics: Iterable[Diagnostic]) -> str:
    lines = [headline]
    lines.extend(f"  {diagnostic}" for diagnostic in diagnostics)
    return "\n".join(lines) + "\n"


def _relativize(path: Path) -> str:
    try:
        return str(path.relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
