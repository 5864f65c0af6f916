"""REST API for manifestcheck."""
