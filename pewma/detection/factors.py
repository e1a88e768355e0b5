from __future__ import annotations

import math
from dataclasses import dataclass

SQRT_2PI = math.sqrt(2 * math.pi)
# Tolerancia relativa para igualar un valor a la media cuando la varianza es nula.
MEAN_MATCH_REL_TOL = 1e-9


@dataclass(frozen=True, slots=True)
class Factors:
    """Momentos exponenciales de la serie.

    ``s1`` estima la media, ``s2`` la media de los cuadrados y
    ``std_deviation`` se deriva como ``sqrt(s2 - s1**2)``. Cada actualización
    devuelve una instancia nueva.
    """

    s1: float = 0.0
    s2: float = 0.0
    std_deviation: float = 0.0

    @property
    def mean(self) -> float:
        return self.s1

    @property
    def variance(self) -> float:
        return self.std_deviation * self.std_deviation

    @property
    def evaluable(self) -> bool:
        return math.isfinite(self.s1) and math.isfinite(self.std_deviation)

    def z_score(self, value: float) -> float | None:
        if not self.evaluable:
            return None
        residual = value - self.s1
        if self.std_deviation == 0:
            # Varianza nula: cualquier desviación es infinitamente anómala.
            if math.isclose(value, self.s1, rel_tol=MEAN_MATCH_REL_TOL):
                return 0.0
            return math.copysign(math.inf, residual)
        return residual / self.std_deviation

    def density(self, value: float) -> float | None:
        z = self.z_score(value)
        if z is None:
            return None
        return math.exp(-(z * z) / 2) / SQRT_2PI

    def is_anomaly(self, threshold: float, value: float) -> bool:
        p = self.density(value)
        if p is None:
            return False
        return p <= threshold

    def update(self, alpha: float, value: float) -> "Factors":
        s1 = alpha * self.s1 + (1 - alpha) * value
        s2 = alpha * self.s2 + (1 - alpha) * value * value
        variance = s2 - s1 * s1
        if math.isnan(variance):
            # inf - inf tras un desbordamiento: el estado queda no evaluable, nunca NaN.
            variance = math.inf
        # El redondeo puede dejar s2 apenas por debajo de s1^2.
        variance = max(variance, 0.0)
        return Factors(s1=s1, s2=s2, std_deviation=math.sqrt(variance))
