"""
Human-readable complaint identifiers.

Format (bit-exact): ``COMP-{YYYYMMDD}-{NNNNN}`` where the date is the
creation date and ``NNNNN`` is a random integer in ``[10000, 99999]``.
"""

from __future__ import annotations

import datetime
import random
import re

HUMAN_ID_PREFIX = "COMP"
SUFFIX_MIN = 10000
SUFFIX_MAX = 99999

HUMAN_ID_PATTERN = re.compile(r"^COMP-(\d{8})-(\d{5})$")


def generate_human_id(on: datetime.date, rng: random.Random | None = None) -> str:
    """Build an identifier for a complaint created on ``on``."""
    rng = rng or random
    suffix = rng.randint(SUFFIX_MIN, SUFFIX_MAX)
    return f"{HUMAN_ID_PREFIX}-{on:%Y%m%d}-{suffix}"


def human_id_date(human_id: str) -> datetime.date | None:
    """Return the date encoded in ``human_id``, or ``None`` if it is malformed."""
    match = HUMAN_ID_PATTERN.match(human_id or "")
    if not match:
        return None
    try:
        return datetime.datetime.strptime(match.group(1), "%Y%m%d").date()
    except ValueError:
        return None
