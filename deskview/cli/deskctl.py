from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Sequence

from deskview.config import load_config
from deskview.core.catalog import DeskCatalog
from deskview.core.records import find_slug_collisions
from deskview.core.sources import json_file_source
from deskview.core.submissions import SubmissionStore


def _store(args: argparse.Namespace) -> SubmissionStore:
    cfg = load_config(args.config)
    return SubmissionStore(args.submissions or cfg["submissions_file"])


def cmd_check(args: argparse.Namespace) -> int:
    cfg = load_config(args.config)
    path = Path(args.desks or cfg["desks_file"])
    catalog = DeskCatalog(json_file_source(path))
    if not asyncio.run(catalog.load()):
        print(f"Error: {catalog.error}", file=sys.stderr)
        return 1
    collisions = find_slug_collisions(catalog.desks)
    print(f"{len(catalog)} desks in {path}")
    for slug, ids in sorted(collisions.items()):
        print(f"- slug {slug!r} used by desks {', '.join(str(i) for i in ids)}")
    return 1 if collisions else 0


def cmd_pending(args: argparse.Namespace) -> int:
    rows = _store(args).pending()
    for row in rows:
        print(f"{row['id']}\t{row['name']}\t{row['title']}\t{row['location']}")
    print(f"{len(rows)} pending")
    return 0


def cmd_approve(args: argparse.Namespace) -> int:
    store = _store(args)
    row = store.approve(args.desk_id)
    store.mark_read(args.desk_id)
    print(f"Approved desk {row['id']} ({row['name']})")
    return 0


def cmd_reject(args: argparse.Namespace) -> int:
    store = _store(args)
    row = store.reject(args.desk_id)
    store.mark_read(args.desk_id)
    print(f"Rejected desk {row['id']} ({row['name']})")
    return 0


def cmd_export(args: argparse.Namespace) -> int:
    cfg = load_config(args.config)
    target = Path(args.output or cfg["desks_file"])
    records = _store(args).approved_records()
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(json.dumps([record.to_dict() for record in records], indent=2), encoding="utf-8")
    print(f"Wrote {len(records)} desks to {target}")
    return 0


def cmd_serve(args: argparse.Namespace) -> int:  # pragma: no cover - starts a server
    import uvicorn

    uvicorn.run("backend.api.index:app", host=args.host, port=args.port, reload=args.reload)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Desk gallery tools")
    parser.add_argument("--config", default=None, help="Path to config.yaml (defaults to ./config.yaml)")
    parser.add_argument("--submissions", default=None, help="Override the submissions store path")
    subparsers = parser.add_subparsers(dest="command", required=True)

    check_parser = subparsers.add_parser("check", help="Load a desks file and report slug collisions")
    check_parser.add_argument("--desks", default=None, help="Desks JSON file (defaults to config desks_file)")
    check_parser.set_defaults(func=cmd_check)

    pending_parser = subparsers.add_parser("pending", help="List submissions awaiting review")
    pending_parser.set_defaults(func=cmd_pending)

    approve_parser = subparsers.add_parser("approve", help="Approve a submission")
    approve_parser.add_argument("desk_id", type=int)
    approve_parser.set_defaults(func=cmd_approve)

    reject_parser = subparsers.add_parser("reject", help="Reject a submission")
    reject_parser.add_argument("desk_id", type=int)
    reject_parser.set_defaults(func=cmd_reject)

    export_parser = subparsers.add_parser("export", help="Write approved desks as a gallery JSON file")
    export_parser.add_argument("--output", default=None, help="Output path (defaults to config desks_file)")
    export_parser.set_defaults(func=cmd_export)

    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API")
    serve_parser.add_argument("--host", default="127.0.0.1")
    serve_parser.add_argument("--port", type=int, default=8000)
    serve_parser.add_argument("--reload", action="store_true")
    serve_parser.set_defaults(func=cmd_serve)

    return parser


def main(argv: Sequence[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    cfg = load_config(args.config)
    logging.basicConfig(
        level=getattr(logging, str(cfg.get("log_level", "INFO")).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        code = args.func(args)
    except Exception as exc:  # pragma: no cover - CLI surface
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)
    sys.exit(code)


if __name__ == "__main__":  # pragma: no cover
    main()
