"""Calendar interpretation of date-like scalars.

Accepted encodings are the ones the YAML 1.2 timestamp resolver tags:

- ``YYYY-MM-DD``
- ``YYYY-MM-DDThh:mm:ss[.fraction]`` with ``T``, ``t`` or blanks as separator
- an optional zone suffix ``Z`` or ``±h[h][:mm]``, optionally preceded by blanks

Anything that matches the resolver but names an impossible calendar date
(month 13, February 30, hour 25) is rejected.
"""

from __future__ import annotations

from datetime import date, datetime

from ruamel.yaml.util import create_timestamp, timestamp_regexp


def parse_date_like(text: str) -> date | datetime | None:
    """Interpret ``text`` as a calendar date or timestamp; ``None`` when it is not one."""
    match = timestamp_regexp.match(text.strip())
    if match is None:
        return None
    try:
        return create_timestamp(**match.groupdict())
    except ValueError:
        return None
