"""
borme.cli
=========

Command-line entry point.

Examples
--------
$ python -m borme.cli parse entry.txt --date 2024-03-01 --id BORME-A-2024-42
$ python -m borme.cli resolve officers.json
$ cat entry.txt | python -m borme.cli parse -
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import textwrap
from pathlib import Path
from typing import Any, List, Optional

from .models import Entry
from .parser import normalize_officer_input, parse_companies, parse_company
from .settings import settings
from .temporal import resolve_officers
from .vocabulary import load_vocabulary, default_vocabulary

logger = logging.getLogger(__name__)


def _read(path: str) -> str:
    if path == "-":
        return sys.stdin.read()
    return Path(path).read_text(encoding="utf-8")


def _dump(payload: Any) -> None:
    json.dump(payload, sys.stdout, ensure_ascii=False, indent=2)
    sys.stdout.write("\n")


def cmd_parse(args: argparse.Namespace) -> int:
    vocab = load_vocabulary(args.vocabulary) if args.vocabulary else default_vocabulary()
    entry = Entry(
        text=_read(args.file),
        identifier=args.id,
        date=args.date,
        company_name=args.name,
    )
    record = parse_company(entry, vocab)
    payload = record.to_dict()
    payload["officer_resolution"] = resolve_officers(record.officers).to_dict()
    _dump(payload)
    return 0


def cmd_resolve(args: argparse.Namespace) -> int:
    """
    Resolve officers from a JSON file holding either raw entries (objects
    with ``full_entry``) or flat officer records.
    """
    try:
        data = json.loads(_read(args.file))
    except json.JSONDecodeError as exc:
        logger.error(f"{args.file} is not valid JSON: {exc}")
        return 1

    items: List[Any] = data if isinstance(data, list) else [data]
    if any(isinstance(i, dict) and "full_entry" in i for i in items):
        records = parse_companies(items)
        events = [e for r in records for e in r.officers]
        by_company = len({r.company_name for r in records}) > 1
    else:
        events = normalize_officer_input(data).events()
        by_company = False

    resolution = resolve_officers(events, by_company=by_company or args.by_company)
    logger.info(
        f"{len(resolution.timeline)} events, {len(resolution.current_officers)} current officers"
    )
    _dump(resolution.to_dict())
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="python -m borme.cli",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description=textwrap.dedent(
            """\
            BORME entry extraction
            ----------------------
            parse     Parse one entry's text into a company record (JSON)
            resolve   Resolve current officers from entries or officer records
            """
        ),
    )
    parser.add_argument("--log-level", default=settings.log_level, help="root log level")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("parse", help="parse one entry")
    p.add_argument("file", help="text file with the entry ('-' for stdin)")
    p.add_argument("--date", help="publication date (YYYY-MM-DD)")
    p.add_argument("--id", help="entry identifier")
    p.add_argument("--name", help="company name hint")
    p.add_argument("--vocabulary", help="vocabulary JSON overriding the bundled one")
    p.set_defaults(func=cmd_parse)

    r = sub.add_parser("resolve", help="resolve officers")
    r.add_argument("file", help="JSON file ('-' for stdin)")
    r.add_argument("--by-company", action="store_true", help="key positions by company too")
    r.set_defaults(func=cmd_resolve)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
