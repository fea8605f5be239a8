# seismopert/core/elastic.py
"""
弹性介质：由 TI（横向各向同性）速度样本推导各物理量

Voigt 平均给出等效各向同性模量：
    KAPPA = (4A + C + 4F - 4N) / 9
    MU    = (A + C - 2F + 5N + 6L) / 15
"""
import math
from typing import Dict

from .types import VariableType


class ElasticMedium:
    """某一半径处的弹性参数集合，构造后只读"""

    def __init__(self, rho: float, vpv: float, vph: float, vsv: float, vsh: float,
                 eta: float, qmu: float, qkappa: float):
        a = rho * vph * vph
        c = rho * vpv * vpv
        l = rho * vsv * vsv
        n = rho * vsh * vsh
        f = eta * (a - 2 * l)
        kappa = (4 * a + c + 4 * f - 4 * n) / 9
        mu = (a + c - 2 * f + 5 * n + 6 * l) / 15
        lam = kappa - 2 * mu / 3

        values = {
            VariableType.RHO: rho,
            VariableType.Vpv: vpv,
            VariableType.Vph: vph,
            VariableType.Vsv: vsv,
            VariableType.Vsh: vsh,
            VariableType.ETA: eta,
            VariableType.A: a,
            VariableType.C: c,
            VariableType.L: l,
            VariableType.N: n,
            VariableType.F: f,
            VariableType.KAPPA: kappa,
            VariableType.MU: mu,
            VariableType.LAMBDA: lam,
            VariableType.LAMBDA2MU: lam + 2 * mu,
            VariableType.Qmu: qmu,
            VariableType.Qkappa: qkappa,
        }
        if l != 0:
            values[VariableType.XI] = n / l
        if rho > 0:
            values[VariableType.Vp] = math.sqrt(max(lam + 2 * mu, 0.0) / rho)
            values[VariableType.Vs] = math.sqrt(max(mu, 0.0) / rho)
            values[VariableType.Vb] = math.sqrt(max(kappa, 0.0) / rho)
        self._values: Dict[VariableType, float] = values

    def get(self, variable: VariableType) -> float:
        """
        取出某一物理量

        Raises:
            ValueError: 该介质无法定义此物理量（如 L=0 时的 XI，或 TIME）
        """
        variable = VariableType.of(variable)
        try:
            return self._values[variable]
        except KeyError:
            raise ValueError(f"介质信息不足，无法定义 {variable}") from None

    def __repr__(self) -> str:
        return (f"ElasticMedium(rho={self._values[VariableType.RHO]}, "
                f"vpv={self._values[VariableType.Vpv]}, vsv={self._values[VariableType.Vsv]})")
