"""
interfaces/cli.py
──────────────────────────────────────────────────────────────────────────────
Command-line interface for the SOC matcher.

Usage:
  # Single program (local keyword matching, 10 results)
  python -m socmatch.interfaces.cli --name "Computer Science" --type Bachelor

  # Also ask the AI ranker (needs OPENAI_API_KEY), 5 results
  python -m socmatch.interfaces.cli --long-name "Nursing (BSN)" --ai --top-n 5

  # Batch file: JSON array of programs, or {"programs": [...]}
  python -m socmatch.interfaces.cli --file data/stanford.json --json

  # Keyword search over the taxonomy
  python -m socmatch.interfaces.cli --search "software dev"

  # Via installed entry-point (pyproject.toml [project.scripts])
  soc-match --name "Chemistry"

Exit codes:
  0 — success
  1 — fatal error (taxonomy, auth, etc.)
  2 — argument error
"""
from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

from socmatch.config.settings import get_settings
from socmatch.domain.models import MatchRequest, MatchResponse, ProgramQuery, SearchResponse
from socmatch.services.container import get_pipeline
from socmatch.services.pipeline import SOCMatchPipeline

logger = logging.getLogger(__name__)

_PROGRAM_ARGS = (
    ("name", "name"),
    ("long_name", "long_name"),
    ("program_type", "program_type"),
    ("degree", "degree_designation"),
    ("college", "college"),
    ("level", "level"),
    ("cip", "cip_code"),
    ("code", "code"),
)


# ── Argument parser ────────────────────────────────────────────────────────

def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="soc-match",
        description="Match an academic program description to SOC occupation codes.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    program = p.add_argument_group("program fields")
    program.add_argument("--name", metavar="TEXT", help="Program name.")
    program.add_argument("--long-name", metavar="TEXT", dest="long_name",
                         help="Program long name.")
    program.add_argument("--type", metavar="TEXT", dest="program_type",
                         help="Program type (e.g. Bachelor, Minor).")
    program.add_argument("--degree", metavar="TEXT",
                         help="Degree designation (e.g. BS, MA).")
    program.add_argument("--college", metavar="TEXT", help="College or school.")
    program.add_argument("--level", metavar="TEXT",
                         help="Level (e.g. Undergraduate).")
    program.add_argument("--cip", metavar="CODE", help="CIP code (shown to the AI ranker).")
    program.add_argument("--code", metavar="CODE", help="Program code.")

    p.add_argument(
        "--file", "-f",
        metavar="FILE",
        type=Path,
        help="JSON file with an array of programs, or an object with a 'programs' array.",
    )
    p.add_argument(
        "--search", "-s",
        metavar="TEXT",
        help="Keyword search over the taxonomy instead of matching.",
    )
    p.add_argument(
        "--top-n", "-n",
        type=int,
        default=get_settings().default_top_n,
        dest="top_n",
        help="Number of matches to return per program. (default: DEFAULT_TOP_N or 10)",
    )
    p.add_argument(
        "--ai",
        action="store_true",
        dest="use_ai",
        help="Also ask the AI ranker (requires OPENAI_API_KEY).",
    )
    p.add_argument(
        "--json",
        action="store_true",
        dest="json_output",
        help="Output results as JSON.",
    )
    p.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable debug logging.",
    )
    return p


# ── Formatting helpers ─────────────────────────────────────────────────────

def _print_match_text(response: MatchResponse) -> None:
    """Pretty-print a MatchResponse to stdout."""
    print(f"\n{'─' * 60}")
    print(f"Program : {response.program.name or '(unnamed)'}")
    if response.program.cip_code:
        print(f"CIP     : {response.program.cip_code}")
    print(f"{'─' * 60}")
    if not response.local_matches:
        print("  (no local matches)")
    for i, m in enumerate(response.local_matches, 1):
        print(f"  #{i:<2} [{m.code}] {m.title}  score={m.relevance_score:.2f}")
        if m.major_group:
            print(f"       Group: {m.major_group}")
    if response.ai_matches is not None:
        print(f"\n  AI matches ({response.ai_model}):")
        for i, m in enumerate(response.ai_matches, 1):
            flag = "✓" if m.verified else "?"
            print(f"  #{i:<2} [{m.code}] {m.title}  {flag}")
            if m.reason:
                print(f"       Reason: {m.reason}")
    elif response.ai_available:
        print("\n  AI matches: unavailable for this request")
    print()


def _print_search_text(response: SearchResponse) -> None:
    print(f"\n{response.total} result(s) for {response.query!r}")
    for entry in response.results:
        print(f"  [{entry.code}] {entry.title}")
    print()


def _print_json(response) -> None:
    print(json.dumps(response.to_dict(), indent=2, ensure_ascii=False))


# ── Main logic ─────────────────────────────────────────────────────────────

def _program_from_args(args: argparse.Namespace) -> ProgramQuery | None:
    fields = {
        target: getattr(args, attr)
        for attr, target in _PROGRAM_ARGS
        if getattr(args, attr)
    }
    return ProgramQuery(**fields) if fields else None


def _load_programs_from_file(path: Path) -> list[ProgramQuery]:
    """Read program records from a JSON file."""
    if not path.exists():
        print(f"ERROR: File not found: {path}", file=sys.stderr)
        sys.exit(2)
    payload = json.loads(path.read_text(encoding="utf-8"))
    records = payload.get("programs", []) if isinstance(payload, dict) else payload
    if not isinstance(records, list):
        raise ValueError(
            "expected a JSON array of programs or an object with a 'programs' array"
        )
    return [ProgramQuery.model_validate(r) for r in records]


async def _match_all(
    pipeline: SOCMatchPipeline,
    programs: list[ProgramQuery],
    args: argparse.Namespace,
) -> int:
    printer = _print_json if args.json_output else _print_match_text
    exit_code = 0
    for program in programs:
        try:
            request = MatchRequest(program=program, top_n=args.top_n, use_ai=args.use_ai)
            response = await pipeline.match(request)
            printer(response)
        except ValidationError as exc:
            logger.exception("Invalid request for program %r", program.display_name)
            print(f"ERROR [{program.display_name!r}]: {exc}", file=sys.stderr)
            exit_code = 1
    return exit_code


def run(args: argparse.Namespace) -> int:
    """Execute matching or search for the given arguments.

    Returns:
        Exit code (0 = success, 1 = error, 2 = argument error).
    """
    program = _program_from_args(args)
    if args.search is None and program is None and args.file is None:
        print("ERROR: provide program fields, --file or --search", file=sys.stderr)
        return 2

    try:
        pipeline = get_pipeline()
    except Exception as exc:
        logger.exception("Failed to initialise pipeline")
        print(f"ERROR: Pipeline initialisation failed: {exc}", file=sys.stderr)
        return 1

    if args.search is not None:
        response = pipeline.search(args.search)
        (_print_json if args.json_output else _print_search_text)(response)
        return 0

    try:
        programs = [program] if program else _load_programs_from_file(args.file)
    except (ValueError, ValidationError) as exc:
        print(f"ERROR: Cannot read programs from {args.file}: {exc}", file=sys.stderr)
        return 2

    return asyncio.run(_match_all(pipeline, programs, args))


def main() -> None:
    """Entry point for the soc-match console script."""
    parser = _build_parser()
    args = parser.parse_args()

    log_level = logging.DEBUG if args.verbose else logging.WARNING
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
    )

    sys.exit(run(args))


if __name__ == "__main__":
    main()
