"""Detección de outliers en series escalares con PEWMA (Probabilistic EWMA)."""

from pewma.detection.config import (
    ConfigError,
    InvalidAlpha,
    InvalidBeta,
    InvalidThreshold,
    InvalidTrainingPeriod,
    PewmaConfig,
)
from pewma.detection.engine import InvalidObservation, PewmaDetector
from pewma.detection.factors import Factors
from pewma.models.events import Status, Verdict

__all__ = [
    "ConfigError",
    "Factors",
    "InvalidAlpha",
    "InvalidBeta",
    "InvalidObservation",
    "InvalidThreshold",
    "InvalidTrainingPeriod",
    "PewmaConfig",
    "PewmaDetector",
    "Status",
    "Verdict",
]
