"""Command-line front end for reading and regenerating quick-reply userscripts."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Sequence, TypedDict

from .catalog import describe_selector
from .config import EngineConfig, load_engine_config
from .option_codec import DecodeError, options_to_records
from .options import Option, OptionKind
from .session import EditorSession, EmptyOptionListError
from .url_normalizer import UrlWarning

LOGGER = logging.getLogger(__name__)


class UrlReport(TypedDict):
    """Structured result of a URL check."""

    url: str
    valid: bool
    message: str | None
    fix: str | None


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Return parsed arguments for the userscript CLI."""

    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to a TOML file overriding page, defaults, template and catalog",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging verbosity for the helper.",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    decode_parser = commands.add_parser(
        "decode", help="List the options embedded in a userscript"
    )
    decode_parser.add_argument("script", type=Path, help="Userscript source file")
    decode_parser.add_argument(
        "--json",
        action="store_true",
        help="Emit the option records as editable JSON",
    )

    encode_parser = commands.add_parser(
        "encode", help="Generate a userscript from a JSON list of option records"
    )
    encode_parser.add_argument("options", type=Path, help="JSON file of option records")
    _add_output_arguments(encode_parser, url_required=True)

    rebuild_parser = commands.add_parser(
        "rebuild", help="Regenerate a userscript from its own options"
    )
    rebuild_parser.add_argument("script", type=Path, help="Userscript source file")
    _add_output_arguments(rebuild_parser, url_required=False)

    url_parser = commands.add_parser("check-url", help="Validate a ticket page URL")
    url_parser.add_argument("url", help="URL of the support ticket page")
    url_parser.add_argument(
        "--json",
        action="store_true",
        help="Emit the validation result as JSON",
    )
    return parser.parse_args(argv)


def _add_output_arguments(
    parser: argparse.ArgumentParser, *, url_required: bool
) -> None:
    parser.add_argument(
        "--url",
        required=url_required,
        default=None,
        help="Ticket page URL matched by the generated script",
    )
    parser.add_argument(
        "--apply-fix",
        action="store_true",
        help="Use the suggested URL repair when the URL does not validate",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Write the generated script here instead of stdout",
    )


def _read_text(path: Path) -> str:
    if not path.is_file():
        raise SystemExit(f"file not found: {path}")
    return path.read_text(encoding="utf-8")


def render_options(options: Sequence[Option], config: EngineConfig) -> list[str]:
    """Return one summary line per option."""

    lines: list[str] = []
    for option in options:
        if option.kind is OptionKind.CUSTOM:
            source = "custom text: " + option.content.replace("\n", " / ")
        else:
            source = "snippet " + describe_selector(option.selector, config.catalog)
        lines.append(f"{option.order}. [{option.colour}] {option.label} -> {source}")
    return lines


def build_url_report(url: str, warning: UrlWarning | None) -> UrlReport:
    return {
        "url": url,
        "valid": warning is None,
        "message": warning.message if warning else None,
        "fix": warning.fix if warning else None,
    }


def render_url_report(report: UrlReport) -> list[str]:
    if report["valid"]:
        return [f"{report['url']}: ok"]
    lines = [f"{report['url']}: {report['message']}"]
    if report["fix"]:
        lines.append(f"suggested fix: {report['fix']}")
    return lines


def _run_decode(args: argparse.Namespace, session: EditorSession) -> int:
    error = session.load_script(_read_text(args.script))
    if error is not None:
        raise SystemExit(f"{args.script}: {error}")

    if args.json:
        records = options_to_records(session.options, escape_newlines=False)
        print(json.dumps(records, ensure_ascii=False, indent=2))
        return 0

    lines: List[str] = []
    if session.url:
        lines.append(f"match: {session.url}")
    lines.extend(render_options(session.options.options, session.config))
    if not session.options:
        lines.append("no options found")
    print("\n".join(lines))
    return 0


def _load_records(path: Path, session: EditorSession) -> None:
    try:
        session.load_records(json.loads(_read_text(path)))
    except (json.JSONDecodeError, DecodeError) as exc:
        raise SystemExit(f"{path}: {exc}") from exc


def _write_script(args: argparse.Namespace, session: EditorSession) -> int:
    if args.url is not None:
        session.set_url(args.url)

    warning = session.url_warning
    if warning is not None:
        for line in render_url_report(build_url_report(session.url, warning)):
            print(line, file=sys.stderr)
        if args.apply_fix and session.apply_fix():
            LOGGER.info("using repaired url %s", session.url)

    try:
        script = session.build_script()
    except EmptyOptionListError as exc:
        raise SystemExit(str(exc)) from exc

    if args.output is None:
        sys.stdout.write(script)
    else:
        args.output.write_text(script, encoding="utf-8")
        LOGGER.info("wrote %d options to %s", len(session.options), args.output)
    return 0


def _run_encode(args: argparse.Namespace, session: EditorSession) -> int:
    _load_records(args.options, session)
    return _write_script(args, session)


def _run_rebuild(args: argparse.Namespace, session: EditorSession) -> int:
    error = session.load_script(_read_text(args.script))
    if error is not None:
        raise SystemExit(f"{args.script}: {error}")
    if args.url is None and not session.url:
        raise SystemExit(f"{args.script}: no @match url found, pass --url")
    return _write_script(args, session)


def _run_check_url(args: argparse.Namespace, session: EditorSession) -> int:
    report = build_url_report(args.url, session.set_url(args.url))
    if args.json:
        print(json.dumps(report))
    else:
        print("\n".join(render_url_report(report)))
    return 0 if report["valid"] else 1


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point for ``quickreply`` commands."""

    args = parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level))

    config = EngineConfig()
    if args.config is not None:
        if not args.config.exists():
            raise SystemExit(f"configuration file not found: {args.config}")
        config = load_engine_config(args.config)

    session = EditorSession(config=config)
    handlers = {
        "decode": _run_decode,
        "encode": _run_encode,
        "rebuild": _run_rebuild,
        "check-url": _run_check_url,
    }
    return handlers[args.command](args, session)


if __name__ == "__main__":  # pragma: no cover - exercised via python -m
    raise SystemExit(main())
