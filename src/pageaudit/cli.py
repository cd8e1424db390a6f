# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""pageaudit CLI: audit, page-audit, match, schema, fix commands.

Usage:
    pageaudit audit FILE [FILE ...] [--page-type TYPE] [--page-name NAME] [--no-facts]
    pageaudit page-audit FILE [--page-type TYPE]
    pageaudit match DESCRIPTION [--all]
    pageaudit schema CONTEXT.json [--page-name NAME] [--page-url URL] [--page-filename FILE]
    pageaudit fix FILE --fix-type TYPE [--page-url URL] [--lang LANG] [--context CONTEXT.json]

FILE may be ``-`` to read from stdin.  Results go to stdout as JSON (the
patched document for ``fix``); logs and errors go to stderr.
"""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from pathlib import Path

from pageaudit.config import LOG_LEVEL_ENV, AuditConfig, load_config
from pageaudit.logging_config import configure, resolve_level
from pageaudit.page_types import PAGE_TYPES

logger = logging.getLogger(__name__)

STDIN_MARKER = "-"


def _read_text(path_str: str) -> str:
    """Read a UTF-8 document from *path_str* or stdin."""
    if path_str == STDIN_MARKER:
        return sys.stdin.read()
    return Path(path_str).read_text(encoding="utf-8")


def _read_context(path_str: str):
    from pageaudit.structured_data.context import BusinessContext

    return BusinessContext.model_validate(json.loads(_read_text(path_str)))


def _write_output(text: str, output: str | None) -> None:
    if output:
        Path(output).write_text(text, encoding="utf-8")
        logger.info("Saved to %s", output)
    else:
        print(text)


def _indent(args: argparse.Namespace) -> int | None:
    return None if args.compact else 2


def cmd_audit(args: argparse.Namespace, config: AuditConfig) -> None:
    """Full content quality audit of one or more documents.

    Identical documents are audited once (``AuditCache``).  One FILE prints
    a single report; several print a list of ``{"file", "report"}`` entries.
    """
    from pageaudit.cache import AuditCache
    from pageaudit.serializer import audit_to_dict

    cache = AuditCache(max_entries=config.cache_size, profile=config.profile)
    reports = []
    for path in args.files:
        result = cache.audit(_read_text(path), args.page_type, args.page_name)
        reports.append({"file": path, "report": audit_to_dict(result, include_facts=not args.no_facts)})
    logger.debug(
        "Audited %d file(s): cache hits=%d misses=%d",
        len(reports),
        cache.stats.hits,
        cache.stats.misses,
    )

    payload = reports[0]["report"] if len(reports) == 1 else reports
    _write_output(json.dumps(payload, ensure_ascii=False, indent=_indent(args)), args.output)


def cmd_page_audit(args: argparse.Namespace, config: AuditConfig) -> None:
    """Weighted-rule quick audit."""
    from pageaudit.page_audit import audit_page
    from pageaudit.serializer import to_json

    result = audit_page(_read_text(args.file), args.page_type, config.page_audit_ladder)
    _write_output(to_json(result, indent=_indent(args)), args.output)


def cmd_match(args: argparse.Namespace, config: AuditConfig) -> None:
    """Recommend a schema.org type for a business description."""
    from pageaudit.structured_data.matcher import rank_candidates, recommend_type

    payload: dict = {
        "description": args.description,
        "schemaType": recommend_type(args.description),
    }
    if args.all:
        payload["candidates"] = [
            {"type": c.type, "score": c.score, "depth": c.depth} for c in rank_candidates(args.description)
        ]
    _write_output(json.dumps(payload, ensure_ascii=False, indent=_indent(args)), args.output)


def cmd_schema(args: argparse.Namespace, config: AuditConfig) -> None:
    """Build every JSON-LD block for one page of a business site."""
    from pageaudit.serializer import to_json
    from pageaudit.structured_data.pipeline import build_page_schemas

    context = _read_context(args.context)
    result = build_page_schemas(
        context,
        args.page_name,
        args.page_url,
        args.page_filename,
        review_date=args.review_date,
    )
    _write_output(to_json(result, indent=_indent(args)), args.output)


def cmd_fix(args: argparse.Namespace, config: AuditConfig) -> None:
    """Apply one client or generated fix and emit the patched document."""
    from pageaudit.remediation import apply_fix

    context = _read_context(args.context) if args.context else None
    result = apply_fix(
        _read_text(args.file),
        args.fix_type,
        page_url=args.page_url,
        lang=args.lang,
        context=context,
    )
    if not result.changed:
        logger.info("%s: nothing to change", result.fix_type)
    _write_output(result.html, args.output)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Content quality audit and schema.org recommendations",
        prog="pageaudit",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging and tracebacks on error")
    parser.add_argument("--json-logs", action="store_true", help="Emit logs as JSON lines on stderr")
    parser.add_argument("--config", type=str, metavar="PATH", help="YAML config file (default: $PAGEAUDIT_CONFIG)")

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("-o", "--output", type=str, metavar="PATH", help="Write to PATH instead of stdout")
    common.add_argument("--compact", action="store_true", help="Compact JSON output")

    page_type_ids = [p.id for p in PAGE_TYPES]
    subparsers = parser.add_subparsers(dest="command", required=True)

    p_audit = subparsers.add_parser(
        "audit",
        parents=[common],
        help="Full content quality audit",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""\
examples:
  %(prog)s index.html                      Audit a local file
  %(prog)s - < index.html                  Audit stdin
  %(prog)s index.html about.html           Audit several pages
  %(prog)s about.html --page-name about    Page-aware schema checks""",
    )
    p_audit.add_argument("files", nargs="+", metavar="FILE", help="HTML document(s), or '-' for stdin")
    p_audit.add_argument("--page-type", choices=page_type_ids, help="Page type for component recommendations")
    p_audit.add_argument("--page-name", type=str, help="Route or page name, e.g. about")
    p_audit.add_argument("--no-facts", action="store_true", help="Omit detailedFindings")

    p_page = subparsers.add_parser("page-audit", parents=[common], help="Weighted-rule quick audit")
    p_page.add_argument("file", metavar="FILE", help="HTML document, or '-' for stdin")
    p_page.add_argument("--page-type", choices=page_type_ids, default="custom")

    p_match = subparsers.add_parser("match", parents=[common], help="Recommend a schema.org type")
    p_match.add_argument("description", metavar="DESCRIPTION", help="Free-text business description")
    p_match.add_argument("--all", action="store_true", help="Include every scored candidate")

    p_schema = subparsers.add_parser("schema", parents=[common], help="Build JSON-LD from a business context")
    p_schema.add_argument("context", metavar="CONTEXT.json", help="Business context JSON, or '-' for stdin")
    p_schema.add_argument("--page-name", type=str, default="homepage", help="Breadcrumb label (default: homepage)")
    p_schema.add_argument("--page-url", type=str, help="Absolute URL of the page")
    p_schema.add_argument("--page-filename", type=str, default="index.html", help="Gates menu/product/service blocks")
    p_schema.add_argument("--review-date", type=str, metavar="YYYY-MM-DD", help="datePublished for standalone reviews")

    p_fix = subparsers.add_parser("fix", parents=[common], help="Apply one client or generated fix")
    p_fix.add_argument("file", metavar="FILE", help="HTML document, or '-' for stdin")
    p_fix.add_argument("--fix-type", required=True, metavar="TYPE", help="e.g. add_viewport, generate_schema_auto")
    p_fix.add_argument("--page-url", type=str, help="Page URL (required by add_canonical)")
    p_fix.add_argument("--lang", type=str, default="en", help="Language for add_lang (default: en)")
    p_fix.add_argument("--context", type=str, metavar="CONTEXT.json", help="Business context for schema fixes")

    return parser


COMMANDS = {
    "audit": cmd_audit,
    "page-audit": cmd_page_audit,
    "match": cmd_match,
    "schema": cmd_schema,
    "fix": cmd_fix,
}


def main(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        configure(
            json_output=args.json_logs,
            level="DEBUG" if args.verbose else os.environ.get(LOG_LEVEL_ENV),
            context={"command": args.command},
        )
        config = load_config(args.config)
        if not args.verbose:
            logging.getLogger().setLevel(resolve_level(config.log_level))
        COMMANDS[args.command](args, config)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        sys.exit(130)
    except SystemExit:
        raise
    except Exception as e:
        from pageaudit.problem_details import from_exception

        problem = from_exception(e, instance=args.command)
        print(problem.to_cli_text(), file=sys.stderr)
        if args.verbose:
            import traceback

            traceback.print_exc(file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
