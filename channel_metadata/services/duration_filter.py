from __future__ import annotations

import re

SHORTS_MAX_SECONDS = 60
# Time part of an ISO-8601 duration, e.g. "PT4M13S". Day/week parts are not
# recognized; anything without a "PT" segment parses to zero.
DURATION_PATTERN = re.compile(
    r"PT(?:(?P<hours>\d+)H)?(?:(?P<minutes>\d+)M)?(?:(?P<seconds>\d+)S)?"
)


def parse_duration(encoded: object) -> int:
    if not isinstance(encoded, str):
        return 0
    matched = DURATION_PATTERN.search(encoded)
    if matched is None:
        return 0

    hours = int(matched.group("hours") or 0)
    minutes = int(matched.group("minutes") or 0)
    seconds = int(matched.group("seconds") or 0)
    return hours * 3_600 + minutes * 60 + seconds


def is_short(duration_seconds: int | None, *, max_seconds: int = SHORTS_MAX_SECONDS) -> bool:
    if duration_seconds is None:
        return False
    return duration_seconds <= max_seconds
