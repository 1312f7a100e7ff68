from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import List


@dataclass
class PathPoint:
    x: int  # days since bounds.start_date
    y: Decimal  # running balance
    date: date

    def to_dict(self) -> dict:
        return {"x": self.x, "y": float(self.y), "date": self.date.isoformat()}


@dataclass
class KeyPoint:
    count: int  # index of the point in the path
    x: int
    date: date
    value: Decimal
    type: str  # 'max', 'min', 'positive' or 'negative'

    def to_dict(self) -> dict:
        return {
            "count": self.count,
            "x": self.x,
            "date": self.date.isoformat(),
            "value": float(self.value),
            "type": self.type,
        }


@dataclass
class KeyPoints:
    inflection_pts: List[KeyPoint] = field(default_factory=list)
    zero_pts: List[KeyPoint] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "inflectionPts": [p.to_dict() for p in self.inflection_pts],
            "zeroPts": [p.to_dict() for p in self.zero_pts],
        }


@dataclass
class PathResult:
    path: List[PathPoint] = field(default_factory=list)
    key_points: KeyPoints = field(default_factory=KeyPoints)

    def to_dict(self) -> dict:
        """Convert to the plain shape consumed by charting collaborators."""
        if not self.path:
            return {"path": [], "keyPoints": []}
        return {
            "path": [p.to_dict() for p in self.path],
            "keyPoints": self.key_points.to_dict(),
        }
