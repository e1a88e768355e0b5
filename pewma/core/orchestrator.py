from __future__ import annotations

import logging
from collections import deque
from collections.abc import Iterable, Iterator

from pewma.analysis.processor import StreamStats, parse_value
from pewma.config.settings import AppSettings
from pewma.detection.config import require_threshold
from pewma.detection.engine import InvalidObservation, PewmaDetector
from pewma.models.events import Verdict

logger = logging.getLogger(__name__)


class StreamRunner:
    def __init__(self, detector: PewmaDetector, threshold: float) -> None:
        self.detector = detector
        self.threshold = require_threshold(threshold)
        self.stats = StreamStats()
        self.recent_outliers: deque[Verdict] = deque(maxlen=300)

    @classmethod
    def from_settings(cls, settings: AppSettings, threshold: float | None = None) -> "StreamRunner":
        detector = PewmaDetector(settings.detector.to_config())
        return cls(detector, settings.detector.threshold if threshold is None else threshold)

    def process(self, value: float) -> Verdict:
        verdict = self.detector.observe(value, self.threshold)
        self.stats.record(verdict)
        if verdict.is_outlier:
            self.recent_outliers.append(verdict)
            logger.warning(
                "Outlier #%d valor=%s densidad=%s media=%s std=%s",
                verdict.index,
                verdict.value,
                verdict.density,
                verdict.mean,
                verdict.std_deviation,
                extra={"verdict": verdict.to_dict()},
            )
        return verdict

    def run(self, values: Iterable[float], max_values: int | None = None) -> Iterator[Verdict]:
        if max_values is not None and max_values <= 0:
            return
        processed = 0
        for value in values:
            yield self.process(value)
            processed += 1
            if max_values is not None and processed >= max_values:
                break

    def run_lines(self, lines: Iterable[str], max_values: int | None = None) -> Iterator[Verdict]:
        return self.run(self._parse_lines(lines), max_values=max_values)

    def _parse_lines(self, lines: Iterable[str]) -> Iterator[float]:
        for lineno, line in enumerate(lines, start=1):
            try:
                value = parse_value(line)
            except InvalidObservation as exc:
                self.stats.skipped_lines += 1
                logger.warning("Línea %d descartada: %s", lineno, exc)
                continue
            if value is not None:
                yield value
