"""Parser for long-format (``ls -la``) directory listings.

The parser is a two-state machine:

    HEADER  -- optional "total N" summary line --> ENTRIES
    ENTRIES -- zero or more fixed-column data lines

Tolerance policy (see ``ListingPolicy``): blank lines, lines with fewer than
``min_fields`` whitespace-separated fields, and the ``.``/``..`` entries are
skipped. Everything after the eighth column is the entry name, kept verbatim
so names containing whitespace survive.
"""

import logging
import re
from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from ..constants import LISTING_FIXED_COLUMNS, LISTING_MIN_FIELDS

logger = logging.getLogger(__name__)

_TOTAL_LINE = re.compile(r"^total\s+\S+$")

_MONTHS = {
    "jan": 1, "feb": 2, "mar": 3, "apr": 4, "may": 5, "jun": 6,
    "jul": 7, "aug": 8, "sep": 9, "oct": 10, "nov": 11, "dec": 12,
}


class _State(Enum):
    HEADER = "header"
    ENTRIES = "entries"


@dataclass(frozen=True)
class ListingPolicy:
    """Explicit tolerance rules for listing lines."""

    min_fields: int = LISTING_MIN_FIELDS
    skip_names: frozenset[str] = frozenset({".", ".."})

    def __post_init__(self) -> None:
        # The name column only exists once all fixed columns are present.
        if self.min_fields < LISTING_FIXED_COLUMNS + 1:
            raise ValueError(
                f"min_fields must be at least {LISTING_FIXED_COLUMNS + 1}, got {self.min_fields}"
            )


@dataclass(frozen=True)
class ListingRecord:
    """One parsed data line."""

    name: str
    is_directory: bool
    mode: str
    links: int
    owner: str
    group: str
    size: int
    modified: datetime | None
    link_target: str | None = None


def parse_listing_timestamp(month: str, day: str, time_or_year: str, now: datetime | None = None) -> datetime | None:
    """Parse the three date columns of an ``ls -l`` line.

    Recent files show ``HH:MM`` and no year; ``ls`` prints those for dates
    within the last six months, so a date that would land in the future
    belongs to the previous year.

    Returns:
        Parsed datetime, or None if the columns are not recognizable
    """
    month_num = _MONTHS.get(month[:3].lower())
    if month_num is None or not day.isdigit():
        return None

    now = now or datetime.now()
    try:
        if ":" in time_or_year:
            hour_str, minute_str = time_or_year.split(":", 1)
            value = datetime(now.year, month_num, int(day), int(hour_str), int(minute_str))
            if value > now:
                value = value.replace(year=now.year - 1)
            return value
        return datetime(int(time_or_year), month_num, int(day))
    except ValueError:
        return None


class DirectoryListingParser:
    """Turn ``ls -la`` text into ``ListingRecord`` objects."""

    def __init__(self, policy: ListingPolicy | None = None):
        self.policy = policy or ListingPolicy()

    def parse(self, output: str) -> list[ListingRecord]:
        """Parse a full listing.

        Args:
            output: Raw stdout of ``ls -la``

        Returns:
            Records in the order they appear in the output
        """
        records: list[ListingRecord] = []
        state = _State.HEADER

        for raw_line in output.splitlines():
            # Trailing whitespace may belong to the entry name.
            line = raw_line.rstrip("\r\n").lstrip()
            if not line.strip():
                continue

            if state is _State.HEADER:
                state = _State.ENTRIES
                if _TOTAL_LINE.match(line.rstrip()):
                    continue

            record = self.parse_line(line)
            if record is not None:
                records.append(record)

        return records

    def parse_line(self, line: str) -> ListingRecord | None:
        """Parse a single data line, or return None if the policy drops it."""
        fields = line.split(None, LISTING_FIXED_COLUMNS)
        if len(fields) < self.policy.min_fields:
            logger.debug("Skipping malformed listing line: %r", line)
            return None

        mode, links, owner, group, size, month, day, time_or_year, name = fields
        link_target = None
        if mode.startswith("l") and " -> " in name:
            name, link_target = name.split(" -> ", 1)

        if name in self.policy.skip_names:
            return None

        is_directory = mode.startswith("d")
        return ListingRecord(
            name=name,
            is_directory=is_directory,
            mode=mode,
            links=int(links) if links.isdigit() else 0,
            owner=owner,
            group=group,
            size=int(size) if size.isdigit() else 0,
            modified=parse_listing_timestamp(month, day, time_or_year),
            link_target=link_target,
        )
