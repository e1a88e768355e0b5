from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


def _json_float(value: float | None) -> float | None:
    # JSON no admite NaN ni infinitos.
    if value is None or not math.isfinite(value):
        return None
    return value


class Status(str, Enum):
    IN_TRAINING = "in_training"
    IN_ORDINARY = "in_ordinary"
    OUTLIER = "outlier"


@dataclass(slots=True)
class Verdict:
    index: int
    value: float
    status: Status
    density: float | None
    mean: float
    std_deviation: float
    alpha: float
    timestamp: datetime = field(default_factory=lambda: datetime.now(tz=timezone.utc))

    @property
    def is_outlier(self) -> bool:
        return self.status is Status.OUTLIER

    def to_dict(self) -> dict[str, Any]:
        return {
            "index": self.index,
            "value": self.value,
            "status": self.status.value,
            "density": _json_float(self.density),
            "mean": _json_float(self.mean),
            "std_deviation": _json_float(self.std_deviation),
            "alpha": _json_float(self.alpha),
            "timestamp": self.timestamp.isoformat(),
        }
