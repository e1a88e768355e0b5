from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field

from pewma.detection.engine import InvalidObservation, require_finite
from pewma.models.events import Verdict


def parse_value(raw: str) -> float | None:
    """Convierte una línea de texto en observación; ``None`` para líneas vacías."""
    text = raw.split("#", 1)[0].strip()
    if not text:
        return None
    try:
        number = float(text)
    except ValueError as exc:
        raise InvalidObservation(f"Observación no numérica: {text!r}") from exc
    return require_finite(number)


@dataclass(slots=True)
class StreamStats:
    observations_total: int = 0
    skipped_lines: int = 0
    by_status: Counter[str] = field(default_factory=Counter)

    def record(self, verdict: Verdict) -> None:
        self.observations_total += 1
        self.by_status[verdict.status.value] += 1

    def to_dict(self) -> dict[str, object]:
        return {
            "observations_total": self.observations_total,
            "skipped_lines": self.skipped_lines,
            "by_status": dict(self.by_status),
        }
