"""Document validation service, shared by the CLI and the REST API."""

from __future__ import annotations

import logging
from pathlib import Path

from ruamel.yaml.error import YAMLError

from manifestcheck.models.errors import DiagnosticDetail, DiagnosticSeverity, ValidationResult
from manifestcheck.models.schema import SchemaModel
from manifestcheck.parser.loader import TrackedLoader, YAMLSafetyError
from manifestcheck.validation.validator import validate_tree

logger = logging.getLogger("manifestcheck.service")


class DocumentValidator:
    """Parses YAML streams and validates every document against one schema.

    The schema model is immutable, so a single instance may serve any
    number of validations. Each document gets its own validator and sink.
    """

    def __init__(self, schema: SchemaModel, loader: TrackedLoader | None = None) -> None:
        self.schema = schema
        self._loader = loader if loader is not None else TrackedLoader()

    def validate(self, yaml_str: str, filename: str = "<string>") -> ValidationResult:
        """Validate a YAML stream. Schema findings are warnings; only parse failures are errors."""
        errors: list[DiagnosticDetail] = []
        warnings: list[DiagnosticDetail] = []

        try:
            documents = self._loader.load_string(yaml_str, filename=filename)
        except YAMLSafetyError as exc:
            errors.append(_error("YAML_SAFETY_ERROR", str(exc)))
            return ValidationResult(valid=False, errors=errors)
        except YAMLError as exc:
            errors.append(_error("YAML_PARSE_ERROR", str(exc)))
            return ValidationResult(valid=False, errors=errors)

        for root in documents:
            for diagnostic in validate_tree(self.schema, root):
                warnings.append(diagnostic.to_detail())

        logger.info(
            "Validated %s: %d document(s), %d warning(s)", filename, len(documents), len(warnings)
        )
        return ValidationResult(valid=True, errors=errors, warnings=warnings)

    def validate_file(self, path: Path) -> ValidationResult:
        try:
            content = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            return ValidationResult(valid=False, errors=[_error("FILE_READ_ERROR", str(exc))])
        return self.validate(content, filename=str(path))


def _error(code: str, message: str) -> DiagnosticDetail:
    return DiagnosticDetail(code=code, message=message, severity=DiagnosticSeverity.ERROR)
