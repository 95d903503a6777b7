"""Command line interface for the quotation builder.

Each sub-command is a thin wrapper over :class:`quote_builder.service.QuoteService`:

* ``new`` / ``import`` create or save quotations.
* ``copy`` duplicates a stored quotation under a fresh number.
* ``show`` / ``totals`` / ``export`` render a stored quotation.
* ``list`` / ``delete`` manage the store.
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Iterable

from quote_builder.config import AppEnvironment, configure_logging, default_currency, get_logger
from quote_builder.errors import QuoteBuilderError
from quote_builder.numbering import JsonFileCounterStore
from quote_builder.pricing import totals_for_record
from quote_builder.render import (
    build_document,
    describe_age,
    export_csv,
    export_text,
    fmt_money,
    quotations_frame,
)
from quote_builder.service import QuoteService
from quote_builder.storage import QuotationStore

logger = get_logger("cli")


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--store", type=Path, help="Directory holding quotation JSON files.")
    parser.add_argument("--state-file", type=Path, help="JSON file holding the number counter.")
    parser.add_argument("--log-level", help="Logging level (default: INFO).")


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="python -m quote_builder",
        description="Build, copy and export client quotations.",
    )
    _add_common_arguments(parser)

    subparsers = parser.add_subparsers(dest="command", required=True)

    next_parser = subparsers.add_parser("next-number", help="Issue the next quotation number.")
    next_parser.set_defaults(handler=handle_next_number)

    new_parser = subparsers.add_parser("new", help="Print a blank quotation as JSON.")
    new_parser.set_defaults(handler=handle_new)

    import_parser = subparsers.add_parser("import", help="Save a quotation from a JSON file.")
    import_parser.add_argument("path", type=Path)
    import_parser.add_argument(
        "--allow-incomplete",
        action="store_true",
        help="Save even when the client name or item names are missing.",
    )
    import_parser.set_defaults(handler=handle_import)

    copy_parser = subparsers.add_parser("copy", help="Copy a stored quotation to a new number.")
    copy_parser.add_argument("doc_no")
    copy_parser.set_defaults(handler=handle_copy)

    show_parser = subparsers.add_parser("show", help="Render a stored quotation.")
    show_parser.add_argument("doc_no")
    show_parser.add_argument("--staff", action="store_true", help="Include internal cost columns.")
    show_parser.set_defaults(handler=handle_show)

    totals_parser = subparsers.add_parser("totals", help="Print the totals of a stored quotation.")
    totals_parser.add_argument("doc_no")
    totals_parser.add_argument("--staff", action="store_true", help="Include internal cost totals.")
    totals_parser.set_defaults(handler=handle_totals)

    list_parser = subparsers.add_parser("list", help="List stored quotations, newest first.")
    list_parser.add_argument("--search", default="", help="Filter by number, client, project or location.")
    list_parser.set_defaults(handler=handle_list)

    export_parser = subparsers.add_parser("export", help="Write a quotation to a file.")
    export_parser.add_argument("doc_no")
    export_parser.add_argument("--format", choices=("text", "csv"), default="text")
    export_parser.add_argument("--output", type=Path, default=Path("."))
    export_parser.add_argument("--staff", action="store_true", help="Include internal cost columns.")
    export_parser.set_defaults(handler=handle_export)

    delete_parser = subparsers.add_parser("delete", help="Delete a stored quotation.")
    delete_parser.add_argument("doc_no")
    delete_parser.set_defaults(handler=handle_delete)

    return parser


def _build_service(args: argparse.Namespace) -> QuoteService:
    env = AppEnvironment.from_env()
    store = QuotationStore(args.store or env.store_dir)
    counter = JsonFileCounterStore(args.state_file or env.state_file)
    return QuoteService(store, counter)


def handle_next_number(args: argparse.Namespace) -> int:
    service = _build_service(args)
    print(service.next_number())
    return 0


def handle_new(args: argparse.Namespace) -> int:
    service = _build_service(args)
    print(json.dumps(service.create().to_dict(), indent=2, ensure_ascii=False))
    return 0


def handle_import(args: argparse.Namespace) -> int:
    service = _build_service(args)
    try:
        payload = json.loads(args.path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise QuoteBuilderError(f"Unable to read {args.path}: {exc}", exc) from exc
    if not isinstance(payload, dict):
        raise QuoteBuilderError(f"{args.path} must hold a JSON object")
    if not payload.get("docNo"):
        payload["docNo"] = service.next_number()
    saved = service.save(payload, require_valid=not args.allow_incomplete)
    print(saved["docNo"])
    return 0


def handle_copy(args: argparse.Namespace) -> int:
    service = _build_service(args)
    copied = service.copy(args.doc_no)
    print(copied.doc_no)
    return 0


def handle_show(args: argparse.Namespace) -> int:
    service = _build_service(args)
    record = service.load(args.doc_no)
    document = build_document(record, staff_mode=args.staff, currency=default_currency())
    sys.stdout.write(document.to_text())
    return 0


def handle_totals(args: argparse.Namespace) -> int:
    service = _build_service(args)
    totals = totals_for_record(service.load(args.doc_no))
    currency = default_currency()
    for key, value in totals.as_dict().items():
        if not args.staff and (key.startswith("actual") or key == "profit"):
            continue
        print(f"{key}: {fmt_money(value, currency)}")
    return 0


def handle_list(args: argparse.Namespace) -> int:
    service = _build_service(args)
    documents = service.search(args.search)
    if not documents:
        print("No quotations found.")
        return 0
    frame = quotations_frame(documents)
    frame["age"] = [describe_age(doc.get("date")) for doc in documents]
    print(frame.to_string(index=False))
    return 0


def handle_export(args: argparse.Namespace) -> int:
    service = _build_service(args)
    record = service.load(args.doc_no)
    if args.format == "csv":
        path = export_csv(record, args.output, staff_mode=args.staff)
    else:
        path = export_text(record, args.output, staff_mode=args.staff, currency=default_currency())
    print(path)
    return 0


def handle_delete(args: argparse.Namespace) -> int:
    service = _build_service(args)
    if not service.delete(args.doc_no):
        print(f"Quotation {args.doc_no} not found.", file=sys.stderr)
        return 1
    print(f"Deleted {args.doc_no}.")
    return 0


def main(argv: Iterable[str] | None = None) -> int:
    parser = create_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)
    configure_logging(args.log_level or AppEnvironment.from_env().log_level)
    handler = args.handler
    try:
        return handler(args)
    except QuoteBuilderError as exc:
        logger.debug("Command %s failed", args.command, exc_info=True)
        print(f"error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":  # pragma: no cover - exercised via module execution
    raise SystemExit(main())
