"""manifestcheck: advisory schema validation for YAML resource manifests."""

__version__ = "0.1.0"
