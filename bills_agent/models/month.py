"""
Month Key Value Type

Paid status and due dates are scoped to a calendar month, keyed by a
`YYYY-MM` string. MonthKey makes that convention explicit: it parses
strictly and fails loudly instead of degrading to "no date".
"""

import calendar
import re
from dataclasses import dataclass
from datetime import date
from typing import Optional, Union


_MONTH_KEY_RE = re.compile(r"^(\d{4})-(\d{2})$")


class InvalidMonthKeyError(ValueError):
    """A month key was not of the form YYYY-MM."""

    def __init__(self, value: object):
        self.value = value
        super().__init__(f"Invalid month '{value}': expected YYYY-MM")


@dataclass(frozen=True, order=True)
class MonthKey:
    """A calendar month, e.g. MonthKey(2024, 2) for '2024-02'."""

    year: int
    month: int

    def __post_init__(self):
        if not 1 <= self.month <= 12:
            raise InvalidMonthKeyError(f"{self.year:04d}-{self.month:02d}")
        if not 1 <= self.year <= 9999:
            raise InvalidMonthKeyError(f"{self.year}-{self.month:02d}")

    @classmethod
    def parse(cls, value: Union[str, "MonthKey", None]) -> "MonthKey":
        """
        Parse a `YYYY-MM` string.

        Raises:
            InvalidMonthKeyError: On anything that is not a well-formed key
        """
        if isinstance(value, MonthKey):
            return value
        if not isinstance(value, str):
            raise InvalidMonthKeyError(value)
        match = _MONTH_KEY_RE.match(value.strip())
        if not match:
            raise InvalidMonthKeyError(value)
        return cls(int(match.group(1)), int(match.group(2)))

    @classmethod
    def current(cls, today: Optional[date] = None) -> "MonthKey":
        today = today or date.today()
        return cls(today.year, today.month)

    @property
    def days_in_month(self) -> int:
        """Number of days in this month, leap years included."""
        return calendar.monthrange(self.year, self.month)[1]

    def due_date(self, day: int) -> date:
        """
        Concrete date for a nominal day of month.

        Days past the end of the month are pinned to its last day,
        days below 1 to the first.
        """
        clamped = min(max(1, day), self.days_in_month)
        return date(self.year, self.month, clamped)

    def __str__(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"
