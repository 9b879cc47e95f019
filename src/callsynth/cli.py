"""Command-line interface for callsynth.

    callsynth generate --count 500 --seed 7 --output data/calls.json
    callsynth validate data/calls.json
    callsynth query data/calls.json --pattern "refund|overtime" --scope caller
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import get_args

from pydantic import ValidationError

from callsynth.config import BlockKind, GenerationConfig, LogLevel, Settings
from callsynth.errors import ConfigurationError, InvalidDocumentError
from callsynth.explorer import (
    ConversationQuery,
    DocumentStore,
    export_selection,
    filter_conversations,
    format_duration,
    total_duration,
)
from callsynth.generator import check_document, generate_dataset
from callsynth.schema.transcript import SENTIMENTS


logger = logging.getLogger(__name__)

LOG_LEVELS = list(get_args(LogLevel))


def _build_parser(settings: Settings) -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="callsynth",
        description="Synthetic phone-support transcript generator",
    )
    ap.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVELS,
        default=settings.log_level,
    )
    sub = ap.add_subparsers(dest="command", required=True)

    gen = sub.add_parser("generate", help="Generate a conversation document")
    gen.add_argument("--count", type=int, default=settings.count)
    gen.add_argument("--seed", type=int, default=settings.seed)
    gen.add_argument("--output", type=Path, default=settings.output_path)
    gen.add_argument("--min-turns", type=int, nargs=2, metavar=("LO", "HI"),
                     help="Range the per-conversation minimum is drawn from")
    gen.add_argument("--max-turns", type=int, nargs=2, metavar=("LO", "HI"),
                     help="Range the per-conversation maximum is drawn from")
    gen.add_argument("--blocks", nargs="+", choices=[k.value for k in BlockKind],
                     help="Restrict body blocks to these kinds")

    val = sub.add_parser("validate", help="Check a document's transcript invariants")
    val.add_argument("path", type=Path)

    q = sub.add_parser("query", help="Filter conversations in a document")
    q.add_argument("path", type=Path)
    q.add_argument("--pattern", default="")
    q.add_argument("--scope", choices=["conversation", "caller", "bot"], default="conversation")
    q.add_argument("--position", choices=["anywhere", "first", "last"], default="anywhere")
    q.add_argument("--sentiment", nargs="+", choices=list(SENTIMENTS), default=list(SENTIMENTS))
    q.add_argument("--intent", default="any")
    q.add_argument("--tool", default="any")
    q.add_argument("--ended-by", choices=["any", "caller", "bot"], default="any")
    q.add_argument("--min-turns", type=int, default=0)
    q.add_argument("--max-turns", type=int, default=200)
    q.add_argument("--min-seconds", type=int, default=0)
    q.add_argument("--max-seconds", type=int, default=3600)
    q.add_argument("--export", type=Path, default=None,
                   help="Write the matching conversations to this file")
    return ap


def _generate(args: argparse.Namespace) -> int:
    overrides = {"count": args.count, "seed": args.seed}
    if args.min_turns:
        overrides["min_turns_range"] = tuple(args.min_turns)
    if args.max_turns:
        overrides["max_turns_range"] = tuple(args.max_turns)
    if args.blocks:
        overrides["body_blocks"] = {BlockKind(b): 1.0 for b in args.blocks}

    try:
        config = GenerationConfig(**overrides)
        total = generate_dataset(args.output, config)
    except ConfigurationError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 2

    print(f"Wrote {total} conversations to {args.output}")
    return 0


def _validate(args: argparse.Namespace) -> int:
    store = DocumentStore()
    try:
        document = store.load_path(args.path)
    except InvalidDocumentError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 2

    report = check_document(document)
    for conversation_id, violations in report.items():
        for violation in violations:
            print(f"{conversation_id}: {violation}")
    print(f"{len(document.conversations) - len(report)}/{len(document.conversations)} conversations valid")
    return 1 if report else 0


def _query(args: argparse.Namespace) -> int:
    store = DocumentStore()
    try:
        store.load_path(args.path)
    except InvalidDocumentError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 2

    try:
        query = ConversationQuery(
            pattern=args.pattern,
            scope=args.scope,
            position=args.position,
            sentiments=set(args.sentiment),
            intent=args.intent,
            tool=args.tool,
            ended_by=args.ended_by,
            min_turns=args.min_turns,
            max_turns=args.max_turns,
            min_seconds=args.min_seconds,
            max_seconds=args.max_seconds,
        )
    except ValidationError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 2
    if query.pattern_error:
        print(f"Invalid regex: {args.pattern}", file=sys.stderr)

    matches = filter_conversations(store.conversations, query)
    for conversation in matches:
        print(
            f"{conversation.conversation_id}\t{len(conversation.turns)} turns\t"
            f"{format_duration(conversation.duration_seconds)}"
        )
    print(
        f"{len(matches)} / {len(store.conversations)} conversations, "
        f"total {format_duration(total_duration(matches))}"
    )
    if args.export is not None:
        export_selection(matches, args.export)
    return 0


COMMANDS = {
    "generate": _generate,
    "validate": _validate,
    "query": _query,
}


def main(argv: list[str] | None = None) -> int:
    settings = Settings()
    args = _build_parser(settings).parse_args(argv)
    logging.basicConfig(
        level=args.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    return COMMANDS[args.command](args)


if __name__ == "__main__":
    sys.exit(main())
