"""Entry point: ``python -m cli [--template ID]``."""
from __future__ import annotations

import argparse
import sys

from config.settings import settings
from services.sessions import build_context
from storage import list_conversations, migrate

from .console import run_scripted, run_template, stdin_reader


def list_templates(ctx) -> None:
    for template in ctx.catalog.latest():
        role = template.metadata.role_type or "-"
        print(f"{template.id}@{template.version} role={role} steps={len(template.steps)} :: {template.name}")


def tail_conversations(limit: int) -> None:
    for summary in list_conversations(limit=limit):
        status = summary.end_reason or ("completed" if summary.completed else summary.stage)
        print(f"[{summary.updated_at:%Y-%m-%d %H:%M}] {summary.id} {summary.candidate_name or '-'} -> {status}")


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(prog="python -m cli", description="Run a screening interview in the terminal")
    parser.add_argument("--template", help="Walk the template with this id instead of the scripted interview")
    parser.add_argument("--version", help="Template version (defaults to the latest)")
    parser.add_argument("--list-templates", action="store_true", help="Show the loaded templates and exit")
    parser.add_argument("--tail-conversations", type=int, metavar="N", help="Show the latest N stored conversations")
    args = parser.parse_args(argv)

    migrate(settings.DB_PATH)
    ctx = build_context()

    if args.list_templates:
        list_templates(ctx)
        return 0
    if args.tail_conversations:
        tail_conversations(args.tail_conversations)
        return 0
    if args.template:
        template = ctx.catalog.get(args.template, args.version)
        if template is None:
            print(f"Unknown template: {args.template}", file=sys.stderr)
            return 2
        run_template(template, stdin_reader, print)
        return 0

    run_scripted(ctx, stdin_reader, print)
    return 0


if __name__ == "__main__":
    sys.exit(main())
