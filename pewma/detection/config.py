from __future__ import annotations

import math
from dataclasses import dataclass


class ConfigError(ValueError):
    """Raised when PEWMA coefficients are out of range."""


class InvalidAlpha(ConfigError):
    pass


class InvalidBeta(ConfigError):
    pass


class InvalidTrainingPeriod(ConfigError):
    pass


class InvalidThreshold(ConfigError):
    pass


@dataclass(frozen=True, slots=True)
class PewmaConfig:
    """Coeficientes de PEWMA: periodo de entrenamiento (T), alpha0 (α) y beta (β)."""

    training_period: int
    alpha0: float
    beta: float

    def __post_init__(self) -> None:
        if not 0 < self.alpha0 < 1:
            raise InvalidAlpha(f"alpha0 debe estar en (0, 1), recibido {self.alpha0!r}")
        if not 0 <= self.beta < 1:
            raise InvalidBeta(f"beta debe estar en [0, 1), recibido {self.beta!r}")
        if isinstance(self.training_period, bool) or not isinstance(self.training_period, int):
            raise InvalidTrainingPeriod(
                f"training_period debe ser un entero, recibido {self.training_period!r}"
            )
        if self.training_period < 1:
            raise InvalidTrainingPeriod(
                f"training_period debe ser positivo, recibido {self.training_period}"
            )

    @classmethod
    def create(cls, training_period: int, alpha0: float, beta: float) -> "PewmaConfig":
        return cls(training_period=training_period, alpha0=alpha0, beta=beta)


def require_threshold(threshold: float) -> float:
    if isinstance(threshold, bool) or not isinstance(threshold, (int, float)):
        raise InvalidThreshold(f"threshold debe ser numérico, recibido {threshold!r}")
    if not math.isfinite(threshold):
        raise InvalidThreshold(f"threshold debe ser finito, recibido {threshold!r}")
    return float(threshold)
