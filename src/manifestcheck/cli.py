"""Command line entry point: validate manifest files and print diagnostics."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from manifestcheck import __version__
from manifestcheck.models.errors import DiagnosticDetail, ValidationResult
from manifestcheck.parser.loader import TrackedLoader
from manifestcheck.schema.transformer import SchemaLoadError, load_schema
from manifestcheck.service.document_validator import DocumentValidator
from manifestcheck.settings import Settings

logger = logging.getLogger("manifestcheck.cli")


def format_detail(filename: str, detail: DiagnosticDetail) -> str:
    """Render one diagnostic as ``file:line:col: severity CODE: message``."""
    if detail.span is not None:
        location = f"{detail.span.file}:{detail.span.line}:{detail.span.column}"
    else:
        location = filename
    return f"{location}: {detail.severity.value} {detail.code}: {detail.message}"


def report(filename: str, result: ValidationResult) -> list[str]:
    return [format_detail(filename, d) for d in [*result.errors, *result.warnings]]


def build_parser(settings: Settings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="manifestcheck",
        description="Check YAML manifests against a resource schema (advisory warnings).",
    )
    parser.add_argument("files", nargs="+", type=Path, help="YAML files to validate")
    parser.add_argument(
        "--schema",
        type=Path,
        default=settings.schema_path,
        help="JSON or YAML schema definition (default: bundled Kubernetes subset)",
    )
    parser.add_argument("--log-level", default=settings.log_level, help="Logging level")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv: list[str] | None = None) -> int:
    settings = Settings()
    args = build_parser(settings).parse_args(argv)
    logging.basicConfig(level=args.log_level.upper())

    try:
        schema = load_schema(args.schema)
    except SchemaLoadError as exc:
        logger.error("%s", exc)
        return 2

    validator = DocumentValidator(
        schema, loader=TrackedLoader(max_document_size=settings.max_document_size)
    )
    exit_code = 0
    for path in args.files:
        result = validator.validate_file(path)
        for line in report(str(path), result):
            print(line)
        if not result.valid:
            exit_code = 1
    return exit_code


if __name__ == "__main__":
    sys.exit(main())
