from __future__ import annotations

import logging
import math
from collections import deque

from pewma.detection.config import PewmaConfig, require_threshold
from pewma.detection.factors import Factors
from pewma.models.events import Status, Verdict

logger = logging.getLogger(__name__)


class InvalidObservation(ValueError):
    """Raised when an observation is not a finite number."""


def require_finite(value: float) -> float:
    # Texto y booleanos no son observaciones; parse_value convierte el texto antes.
    if isinstance(value, (bool, str, bytes)):
        raise InvalidObservation(f"Observación no numérica: {value!r}")
    try:
        number = float(value)
    except (TypeError, ValueError) as exc:
        raise InvalidObservation(f"Observación no numérica: {value!r}") from exc
    if not math.isfinite(number):
        raise InvalidObservation(f"Observación no finita: {value!r}")
    # s2 acumula value**2: un cuadrado no finito dejaría el estado sin evaluar.
    if not math.isfinite(number * number):
        raise InvalidObservation(f"Observación fuera de rango: {value!r}")
    return number


class PewmaDetector:
    """Detector PEWMA (Probabilistic Exponentially Weighted Moving Average) de una serie.

    Mantiene los ``training_period`` valores más recientes y los momentos
    exponenciales de la serie. ``classify`` es una consulta pura contra el
    estado actual; ``ingest`` incorpora el valor. Para decidir sobre un valor
    antes de que influya en la estimación use ``observe``.
    """

    def __init__(self, config: PewmaConfig) -> None:
        self.config = config
        self._history: deque[float] = deque(maxlen=config.training_period)
        self._factors = Factors()
        self._samples_seen = 0

    @property
    def factors(self) -> Factors:
        return self._factors

    @property
    def history(self) -> list[float]:
        return list(self._history)

    @property
    def samples_seen(self) -> int:
        return self._samples_seen

    @property
    def in_training(self) -> bool:
        return len(self._history) < self.config.training_period

    def alpha(self, value: float) -> float:
        """Peso de retención para ``value`` según el estado previo a la actualización."""
        conf = self.config
        captured = len(self._history)
        if captured < conf.training_period:
            return 1 - 1 / (captured + 1)
        density = self._factors.density(value)
        if density is None:
            density = 0.0
        return (1 - conf.beta * density) * conf.alpha0

    def classify(self, value: float, threshold: float) -> Status:
        value = require_finite(value)
        threshold = require_threshold(threshold)
        if self.in_training:
            return Status.IN_TRAINING
        if self._factors.is_anomaly(threshold, value):
            return Status.OUTLIER
        return Status.IN_ORDINARY

    def ingest(self, value: float) -> float:
        """Incorpora ``value`` y devuelve el peso alpha aplicado."""
        value = require_finite(value)
        previous = self._factors
        alpha = self.alpha(value)
        self._factors = previous.update(alpha, value)
        self._history.append(value)
        self._samples_seen += 1

        logger.debug(
            "pewma_ingest n=%d alpha=%.6f mean=%.6f std=%.6f",
            self._samples_seen,
            alpha,
            self._factors.s1,
            self._factors.std_deviation,
        )
        if self._samples_seen == self.config.training_period:
            logger.info("Entrenamiento completo tras %d observaciones", self._samples_seen)
        if previous.evaluable and not self._factors.evaluable:
            logger.warning(
                "Estado numérico no evaluable tras la observación %d (s1=%r, std=%r)",
                self._samples_seen,
                self._factors.s1,
                self._factors.std_deviation,
            )
        return alpha

    def observe(self, value: float, threshold: float) -> Verdict:
        value = require_finite(value)
        baseline = self._factors
        status = self.classify(value, threshold)
        density = None if status is Status.IN_TRAINING else baseline.density(value)
        alpha = self.ingest(value)
        return Verdict(
            index=self._samples_seen - 1,
            value=value,
            status=status,
            density=density,
            mean=baseline.mean,
            std_deviation=baseline.std_deviation,
            alpha=alpha,
        )

    def copy(self) -> "PewmaDetector":
        clone = PewmaDetector(self.config)
        clone._history.extend(self._history)
        clone._factors = self._factors
        clone._samples_seen = self._samples_seen
        return clone
