"""CLI utility for diagnostics and one-off lookups without the local server.

Examples:
  parker-lookup-debug status
  parker-lookup-debug lookup "https://www.linkedin.com/in/kaidi-cao-398131117"
  parker-lookup-debug lookup "https://www.linkedin.com/in/anshulsaha" --first Anshul --last Saha
  parker-lookup-debug create --first Kaidi --last Cao --url "https://www.linkedin.com/in/kaidi-cao-398131117"
  parker-lookup-debug parse saved_candidate.html --url "https://parker.candidatelabs.com/candidates/42"
  parker-lookup-debug match saved_search.html --url "https://www.linkedin.com/in/kaidi-cao-398131117"
"""

from __future__ import annotations

import argparse
import asyncio
import getpass
import json
import logging
from pathlib import Path

from .config import ensure_dirs

FAILURE_KINDS = {"auth_error", "network_error", "validation_error"}


def _print_json(data: object) -> None:
    print(json.dumps(data, indent=2, ensure_ascii=False))


def _result_exit_code(result: object) -> int:
    return 1 if getattr(result, "kind", None) in FAILURE_KINDS else 0


def cmd_status() -> int:
    from .client import ParkerClient

    async def run() -> bool:
        async with ParkerClient() as client:
            return await client.check_authenticated()

    authenticated = asyncio.run(run())
    print(f"Parker session: {'connected' if authenticated else 'not connected'}")
    return 0 if authenticated else 1


def cmd_login() -> int:
    from .client import ParkerClient

    async def run():
        async with ParkerClient() as client:
            return await client.login()

    result = asyncio.run(run())
    _print_json(result.model_dump(exclude_none=True))
    return 0 if result.ok else 1


def cmd_lookup(url: str, first: str = "", last: str = "") -> int:
    from .client import ParkerClient

    async def run():
        async with ParkerClient() as client:
            return await client.lookup(url, first, last)

    result = asyncio.run(run())
    _print_json(result.model_dump(mode="json", exclude_none=True))
    return _result_exit_code(result)


def cmd_create(first: str, last: str, url: str, sourced_date: str | None = None) -> int:
    from .client import ParkerClient

    async def run():
        async with ParkerClient() as client:
            return await client.create(first, last, url, sourced_date)

    result = asyncio.run(run())
    _print_json(result.model_dump(mode="json", exclude_none=True))
    return _result_exit_code(result)


def cmd_parse(path: Path, url: str) -> int:
    """Parse a saved candidate detail page."""
    from .errors import CandidateIdError
    from .parsers.candidate_parser import parse_candidate_page

    if not path.exists():
        print(f"No such file: {path}")
        return 1
    try:
        record = parse_candidate_page(path.read_text(encoding="utf-8"), url)
    except CandidateIdError as exc:
        print(str(exc))
        return 1
    _print_json(record.to_dict())
    return 0


def cmd_match(path: Path, url: str) -> int:
    """Scan a saved search results page for a LinkedIn URL."""
    from .parsers.search_parser import find_candidate_path

    if not path.exists():
        print(f"No such file: {path}")
        return 1
    match = find_candidate_path(path.read_text(encoding="utf-8"), url)
    print(match or "No matching row.")
    return 0 if match else 1


def cmd_configure(email: str, password: str | None) -> int:
    from .settings import SettingsStore

    if password is None:
        password = getpass.getpass("Parker password: ")
    if not email.strip() or not password:
        print("Please enter both email and password.")
        return 1
    store = SettingsStore()
    store.save_credentials(email, password)
    print(f"Saved credentials to {store.path}")
    return cmd_login()


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="parker-lookup-debug",
        description="Debug + lookup CLI for Parker Lookup.",
        formatter_class=argparse.RawTextHelpFormatter,
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    sub = parser.add_subparsers(dest="command")

    sub.add_parser("status", help="Check whether the Parker session is signed in.")
    sub.add_parser("login", help="Log in with the stored credentials.")

    lookup = sub.add_parser("lookup", help="Look up a LinkedIn profile URL in Parker.")
    lookup.add_argument("url", help="LinkedIn profile URL.")
    lookup.add_argument("--first", default="", help="First name shown on the profile.")
    lookup.add_argument("--last", default="", help="Last name shown on the profile.")

    create = sub.add_parser("create", help="Create a stub candidate (skipped if it already exists).")
    create.add_argument("--first", required=True, help="First name.")
    create.add_argument("--last", required=True, help="Last name.")
    create.add_argument("--url", required=True, help="LinkedIn profile URL.")
    create.add_argument("--sourced-date", default=None, help="Sourced date, YYYY-MM-DD (default: today).")

    parse = sub.add_parser("parse", help="Parse a saved candidate detail page.")
    parse.add_argument("file", type=Path, help="Saved HTML file.")
    parse.add_argument("--url", required=True, help="URL the page was served from (/candidates/<id>).")

    match = sub.add_parser("match", help="Find a LinkedIn URL in a saved search results page.")
    match.add_argument("file", type=Path, help="Saved HTML file.")
    match.add_argument("--url", required=True, help="LinkedIn profile URL to look for.")

    configure = sub.add_parser("configure", help="Save Parker credentials and test them.")
    configure.add_argument("--email", required=True, help="Parker login email.")
    configure.add_argument("--password", default=None, help="Parker password (prompted when omitted).")

    return parser


def main() -> None:
    ensure_dirs()
    parser = _build_parser()
    args = parser.parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s: %(message)s",
    )

    if not args.command:
        parser.print_help()
        return

    if args.command == "status":
        raise SystemExit(cmd_status())
    if args.command == "login":
        raise SystemExit(cmd_login())
    if args.command == "lookup":
        raise SystemExit(cmd_lookup(args.url, args.first, args.last))
    if args.command == "create":
        raise SystemExit(cmd_create(args.first, args.last, args.url, args.sourced_date))
    if args.command == "parse":
        raise SystemExit(cmd_parse(args.file, args.url))
    if args.command == "match":
        raise SystemExit(cmd_match(args.file, args.url))
    if args.command == "configure":
        raise SystemExit(cmd_configure(args.email, args.password))

    parser.print_help()
