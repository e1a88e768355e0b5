from __future__ import annotations

from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

import yaml

from pewma.core.logging_setup import LOG_LEVELS
from pewma.detection.config import PewmaConfig


@dataclass(slots=True)
class DetectorSettings:
    training_period: int = 30
    alpha0: float = 0.97
    beta: float = 0.5
    threshold: float = 0.01

    def to_config(self) -> PewmaConfig:
        return PewmaConfig.create(self.training_period, self.alpha0, self.beta)


@dataclass(slots=True)
class OutputSettings:
    only_outliers: bool = False


@dataclass(slots=True)
class AppSettings:
    app_name: str = "PEWMA STREAM DETECTOR"
    log_level: str = "INFO"
    detector: DetectorSettings = field(default_factory=DetectorSettings)
    output: OutputSettings = field(default_factory=OutputSettings)


class SettingsLoader:
    @staticmethod
    def _loads(text: str) -> dict[str, Any]:
        data = yaml.safe_load(text)
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ValueError("Configuración inválida: se esperaba un mapeo YAML")
        return data

    @staticmethod
    def load(path: str | Path) -> AppSettings:
        content = SettingsLoader._loads(Path(path).read_text(encoding="utf-8"))

        detector = DetectorSettings(**(content.get("detector") or {}))
        output = OutputSettings(**(content.get("output") or {}))

        log_level = content.get("log_level", "INFO")
        if not isinstance(log_level, str) or log_level.upper() not in LOG_LEVELS:
            raise ValueError(f"log_level inválido: {log_level!r}; use uno de {', '.join(LOG_LEVELS)}")

        return AppSettings(
            app_name=content.get("app_name", "PEWMA STREAM DETECTOR"),
            log_level=log_level,
            detector=detector,
            output=output,
        )

    @staticmethod
    def dump_default(path: str | Path) -> None:
        defaults = AppSettings()
        payload: dict[str, Any] = {
            "app_name": defaults.app_name,
            "log_level": defaults.log_level,
            "detector": asdict(defaults.detector),
            "output": asdict(defaults.output),
        }
        Path(path).write_text(yaml.safe_dump(payload, sort_keys=False), encoding="utf-8")
