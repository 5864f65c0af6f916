"""Schema definition loading and flattening."""

from manifestcheck.schema.transformer import SchemaLoadError, SchemaTransformer, load_schema

__all__ = [
    "SchemaLoadError",
    "SchemaTransformer",
    "load_schema",
]
