"""YAML parsing with line fidelity for manifestcheck."""

from manifestcheck.parser.loader import TrackedLoader, YAMLSafetyError

__all__ = [
    "TrackedLoader",
    "YAMLSafetyError",
]
