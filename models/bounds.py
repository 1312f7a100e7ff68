from dataclasses import dataclass, replace
from datetime import date
from typing import Optional


@dataclass(frozen=True)
class Bounds:
    start_date: Optional[date]  # inclusive, None means "from the first occurrence"
    end_date: date  # inclusive

    def with_end_date(self, end_date: date) -> "Bounds":
        """Return a copy of these bounds ending on ``end_date``."""
        return replace(self, end_date=end_date)

    def to_dict(self) -> dict:
        return {
            "startDate": self.start_date.isoformat() if self.start_date else None,
            "endDate": self.end_date.isoformat(),
        }
