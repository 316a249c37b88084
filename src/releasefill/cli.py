"""releasefill command-line interface."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from releasefill.build import load_distribution, load_meta, write_changed_files
from releasefill.changelog import DEFAULT_CHANGELOG_RE, parse_changelog
from releasefill.config import load_config
from releasefill.dates import normalize_release_date
from releasefill.plugin import TemplatePlugin
from releasefill.release import validate_before_release

LOG_FORMAT = "[%(name)s] %(message)s"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Fill release templates from a changelog")
    parser.add_argument("--verbose", action="store_true", help="Log debug messages")
    subparsers = parser.add_subparsers(dest="command", required=True)

    fill = subparsers.add_parser("fill", help="Fill templates in a distribution tree")
    fill.add_argument("--root", default=".")
    fill.add_argument("--meta", default=None, help="CPAN::Meta style JSON (default ROOT/META.json)")
    fill.add_argument("--config", default=None, help="TOML file with [tool.releasefill]")
    fill.add_argument("--dry-run", action="store_true")
    fill.add_argument(
        "--check-release",
        action="store_true",
        help="Also refuse a missing or placeholder release date",
    )

    changes = subparsers.add_parser("changes", help="Show the current release from a changelog")
    changes.add_argument("--changelog", default="Changes")
    changes.add_argument("--version", required=True)
    changes.add_argument("--pattern", default=DEFAULT_CHANGELOG_RE)
    changes.add_argument("--window", type=int, default=1)
    changes.add_argument("--date-format", default="")
    changes.add_argument("--locale", default="en")

    check = subparsers.add_parser("check-release", help="Verify the changelog release date")
    check.add_argument("--changelog", default="Changes")
    check.add_argument("--version", required=True)
    check.add_argument("--pattern", default=DEFAULT_CHANGELOG_RE)

    return parser


def _run_fill(args: argparse.Namespace) -> int:
    config = load_config(args.config)
    meta = load_meta(args.meta or str(Path(args.root) / "META.json"))
    dist = load_distribution(args.root, meta)

    plugin = TemplatePlugin(config=config)
    plugin.setup_installer(dist)
    if args.check_release:
        plugin.before_release()

    changed = [file.name for file in dist.files if file.changed]
    if args.dry_run:
        for name in changed:
            print(f"Would update: {name}")
        return 0

    for name in write_changed_files(args.root, dist):
        print(f"Updated: {name}")
    return 0


def _run_changes(args: argparse.Namespace) -> int:
    changelog = Path(args.changelog)
    entry = parse_changelog(
        changelog.read_text(encoding="utf-8"),
        expected_version=args.version,
        pattern=args.pattern,
        release_window=max(1, args.window),
        filename=changelog.name,
    )
    normalized = normalize_release_date(entry.raw_date, args.date_format, locale=args.locale)
    print(f"Version {entry.version} released {normalized.display_date}")
    print(entry.change_text, end="")
    return 0


def _run_check_release(args: argparse.Namespace) -> int:
    changelog = Path(args.changelog)
    entry = parse_changelog(
        changelog.read_text(encoding="utf-8"),
        expected_version=args.version,
        pattern=args.pattern,
        filename=changelog.name,
    )
    normalized = normalize_release_date(entry.raw_date)
    validate_before_release(entry, normalized.parsed, changelog=changelog.name)
    print(f"Release date OK: {entry.raw_date}")
    return 0


COMMANDS = {
    "fill": _run_fill,
    "changes": _run_changes,
    "check-release": _run_check_release,
}


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format=LOG_FORMAT,
    )

    try:
        return COMMANDS[args.command](args)
    except (ValueError, OSError) as exc:
        print(f"{args.command} failed: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
