# seismopert/core/structure.py
"""
一维多项式参考结构（PREM 类）

每个 zone 在 [rmin, rmax) 内用归一化半径 x = r / R_earth 的三次多项式
描述 rho, vpv, vph, vsv, vsh, eta，并给出常数 Qmu, Qkappa。
"""
import logging
from pathlib import Path
from typing import Callable, Dict, Optional, Union

import numpy as np
from numpy.polynomial import polynomial as P

from .elastic import ElasticMedium
from .errors import ConfigurationError, OutOfRangeError
from .types import ArrayLike, VariableType

logger = logging.getLogger(__name__)

_COEFF_FIELDS = ("rho", "vpv", "vph", "vsv", "vsh", "eta")


class PolynomialStructure:
    '''
    多项式参考结构

    Args:
        rmin, rmax: 各 zone 的下/上边界半径 [km]，长度 nzone
        rho, vpv, vph, vsv, vsh, eta: 形状 (nzone, 4) 的多项式系数（常数项在前）
        qmu, qkappa: 各 zone 的品质因子，长度 nzone
        name: 结构名称（仅用于显示）
    '''

    def __init__(self, rmin: ArrayLike, rmax: ArrayLike,
                 rho: ArrayLike, vpv: ArrayLike, vph: ArrayLike,
                 vsv: ArrayLike, vsh: ArrayLike, eta: ArrayLike,
                 qmu: ArrayLike, qkappa: ArrayLike, name: Optional[str] = None):
        self.rmin = self._frozen(rmin, "rmin", ndim=1)
        self.rmax = self._frozen(rmax, "rmax", ndim=1)
        n_zone = self.rmin.size
        if n_zone == 0:
            raise ValueError("结构至少需要一个 zone")
        if self.rmax.size != n_zone:
            raise ValueError(f"rmin 与 rmax 长度不一致: {n_zone} vs {self.rmax.size}")
        if np.any(self.rmin >= self.rmax):
            raise ValueError("每个 zone 需满足 rmin < rmax")

        coeffs = dict(zip(_COEFF_FIELDS, (rho, vpv, vph, vsv, vsh, eta)))
        for field, value in coeffs.items():
            arr = self._frozen(value, field, ndim=2)
            if arr.shape != (n_zone, 4):
                raise ValueError(f"{field} 应为 ({n_zone}, 4) 的系数矩阵，当前 shape={arr.shape}")
            setattr(self, field, arr)

        self.qmu = self._frozen(qmu, "qmu", ndim=1)
        self.qkappa = self._frozen(qkappa, "qkappa", ndim=1)
        if self.qmu.size != n_zone or self.qkappa.size != n_zone:
            raise ValueError("qmu / qkappa 长度应与 zone 数一致")
        self.name = name

    @staticmethod
    def _frozen(value, field: str, ndim: int) -> np.ndarray:
        arr = np.array(value, dtype=float)
        if arr.ndim != ndim:
            raise ValueError(f"{field} 应为 {ndim} 维数组，当前 shape={arr.shape}")
        arr.setflags(write=False)
        return arr

    @classmethod
    def isotropic(cls, rmin: ArrayLike, rmax: ArrayLike, rho: ArrayLike,
                  vp: ArrayLike, vs: ArrayLike, qmu: ArrayLike, qkappa: ArrayLike,
                  name: Optional[str] = None) -> "PolynomialStructure":
        """各向同性结构：vpv=vph=vp, vsv=vsh=vs, eta=1"""
        n_zone = len(rmin)
        eta = np.zeros((n_zone, 4))
        eta[:, 0] = 1.0
        return cls(rmin, rmax, rho, vp, vp, vs, vs, eta, qmu, qkappa, name=name)

    # ====================
    # 查询
    # ====================
    @property
    def n_zone(self) -> int:
        return int(self.rmin.size)

    @property
    def earth_radius(self) -> float:
        return float(self.rmax[-1])

    def zone_of(self, radius: float) -> int:
        """
        半径所在 zone 的索引（rmin <= r < rmax；地表半径归入最后一个 zone）

        Raises:
            OutOfRangeError: 半径不在结构定义范围内
        """
        r = float(radius)
        if r == self.earth_radius:
            return self.n_zone - 1
        hits = np.flatnonzero((self.rmin <= r) & (r < self.rmax))
        if hits.size == 0:
            raise OutOfRangeError(
                f"半径 {r} 超出结构 {self.name or ''} 的定义范围 "
                f"[{self.rmin[0]}, {self.earth_radius}]")
        return int(hits[0])

    def medium_at(self, radius: float) -> ElasticMedium:
        """某半径处的弹性介质"""
        izone = self.zone_of(radius)
        x = float(radius) / self.earth_radius
        vals = {field: float(P.polyval(x, getattr(self, field)[izone])) for field in _COEFF_FIELDS}
        return ElasticMedium(qmu=float(self.qmu[izone]), qkappa=float(self.qkappa[izone]), **vals)

    def value_at(self, variable: Union[str, VariableType], radius: float) -> float:
        """某半径处某物理量的参考值"""
        return self.medium_at(radius).get(VariableType.of(variable))

    # ====================
    # 比较
    # ====================
    def __eq__(self, other) -> bool:
        if not isinstance(other, PolynomialStructure):
            return NotImplemented
        fields = ("rmin", "rmax") + _COEFF_FIELDS + ("qmu", "qkappa")
        return all(np.array_equal(getattr(self, f), getattr(other, f)) for f in fields)

    __hash__ = None

    def __repr__(self) -> str:
        return f"PolynomialStructure(name={self.name!r}, n_zone={self.n_zone})"


# ========================================
# 内置参考结构
# ========================================
def _rows(*rows):
    return np.array(rows, dtype=float)


def _prem_tables():
    rmin = [0, 1221.5, 3480, 3630, 5600, 5701, 5771, 5971, 6151, 6291, 6346.6, 6356]
    rmax = [1221.5, 3480, 3630, 5600, 5701, 5771, 5971, 6151, 6291, 6346.6, 6356, 6371]
    mantle_rho = (7.9565, -6.4761, 5.5283, -3.0807)
    rho = _rows((13.0885, 0, -8.8381, 0), (12.5815, -1.2638, -3.6426, -5.5281),
                mantle_rho, mantle_rho, mantle_rho,
                (5.3197, -1.4836, 0, 0), (11.2494, -8.0298, 0, 0), (7.1089, -3.8045, 0, 0),
                (2.691, 0.6924, 0, 0), (2.691, 0.6924, 0, 0), (2.9, 0, 0, 0), (2.6, 0, 0, 0))
    vpv = _rows((11.2622, 0, -6.364, 0), (11.0487, -4.0362, 4.8023, -13.5732),
                (15.3891, -5.3181, 5.5242, -2.5514), (24.952, -40.4673, 51.4832, -26.6419),
                (29.2766, -23.6027, 5.5242, -2.5514), (19.0957, -9.8672, 0, 0),
                (39.7027, -32.6166, 0, 0), (20.3926, -12.2569, 0, 0),
                (0.8317, 7.218, 0, 0), (0.8317, 7.218, 0, 0), (6.8, 0, 0, 0), (5.8, 0, 0, 0))
    vsv = _rows((3.6678, 0, -4.4475, 0), (0, 0, 0, 0),
                (6.9254, 1.4672, -2.0834, 0.9783), (11.1671, -13.7818, 17.4575, -9.2777),
                (22.3459, -17.2473, -2.0834, 0.9783), (9.9839, -4.9324, 0, 0),
                (22.3512, -18.5856, 0, 0), (8.9496, -4.4597, 0, 0),
                (5.8582, -1.4678, 0, 0), (5.8582, -1.4678, 0, 0), (3.9, 0, 0, 0), (3.2, 0, 0, 0))
    qmu = [84.6, -1, 312, 312, 312, 143, 143, 143, 80, 600, 600, 600]
    qkappa = [1327.7] + [57823] * 11
    return rmin, rmax, rho, vpv, vsv, qmu, qkappa


def _prem() -> PolynomialStructure:
    rmin, rmax, rho, vpv, vsv, qmu, qkappa = _prem_tables()
    # 6151-6346.6 km 为横向各向同性层
    vph = vpv.copy()
    vph[8:10] = (3.5908, 4.6172, 0, 0)
    vsh = vsv.copy()
    vsh[8:10] = (-1.0839, 5.7176, 0, 0)
    eta = np.zeros((12, 4))
    eta[:, 0] = 1.0
    eta[8:10] = (3.3687, -2.4778, 0, 0)
    return PolynomialStructure(rmin, rmax, rho, vpv, vph, vsv, vsh, eta, qmu, qkappa, name="PREM")


def _iprem() -> PolynomialStructure:
    rmin, rmax, rho, vp, vs, qmu, qkappa = _prem_tables()
    vp[8:10] = (4.1875, 3.9382, 0, 0)
    vs[8:10] = (2.1519, 2.3481, 0, 0)
    return PolynomialStructure.isotropic(rmin, rmax, rho, vp, vs, qmu, qkappa, name="IPREM")


def _iasp91() -> PolynomialStructure:
    rmin = [0, 1217.1, 3482, 3631, 5611, 5711, 5961, 6161, 6251, 6336, 6351]
    rmax = [1217.1, 3482, 3631, 5611, 5711, 5961, 6161, 6251, 6336, 6351, 6371]
    prem_rho = _prem_tables()[2]
    rho = prem_rho[[0, 1, 2, 3, 4, 6, 7, 8, 9, 10, 11]]
    vp = _rows((11.24094, 0, -4.09689, 0), (10.03904, 3.75665, -13.67046, 0),
               (14.49470, -1.47089, 0, 0), (25.1486, -41.1538, 51.9932, -26.6083),
               (25.96984, -16.93412, 0, 0), (29.38896, -21.40656, 0, 0),
               (30.78765, -23.25415, 0, 0), (25.41389, -17.69722, 0, 0),
               (8.78541, -0.74953, 0, 0), (6.5, 0, 0, 0), (5.8, 0, 0, 0))
    vs = _rows((3.56454, 0, -3.45241, 0), (0, 0, 0, 0),
               (8.16616, -1.58206, 0, 0), (12.9303, -21.259, 27.8988, -14.108),
               (20.7689, -16.53147, 0, 0), (17.70732, -13.50652, 0, 0),
               (15.24213, -11.08552, 0, 0), (5.7502, -1.2742, 0, 0),
               (6.706231, -2.248585, 0, 0), (3.75, 0, 0, 0), (3.36, 0, 0, 0))
    qmu = [84.6, -1, 312, 312, 312, 143, 143, 80, 600, 600, 600]
    qkappa = [1327.7] + [57823] * 10
    return PolynomialStructure.isotropic(rmin, rmax, rho, vp, vs, qmu, qkappa, name="IASP91")


def _miasp91() -> PolynomialStructure:
    rmin = [0, 1221.5, 3480, 3630, 5610, 5641, 5781, 5891, 5971, 6030.9, 6160, 6281]
    rmax = [1221.5, 3480, 3630, 5610, 5641, 5781, 5891, 5971, 6030.9, 6160, 6281, 6371]
    tz_rho = (14.743076955227242, -11.868712364945988, 0, 0)
    rho = _rows((13.0885, 0, -8.8381, 0), (12.5815, -1.2638, -3.6426, -5.5281),
                (7.2586, -3.1016, 0, 0), (7.9469, -6.4376, 5.4773, -3.0584),
                (7.8896, -3.9208, 0, 0), (22.3146, -20.2128, 0, 0),
                tz_rho, tz_rho, tz_rho,
                (8.1973, -4.9538, 0, 0), (6.1900, -2.8776, 0, 0), (5.6768, -2.3570, 0, 0))
    vp = _rows((11.2622, 0, -6.3640, 0), (11.0487, -4.0362, 4.8023, -13.5732),
               (14.4729, -1.4327, 0, 0), (25.0591, -40.7952, 51.5188, -26.4007),
               (25.8698, -16.8211, 0, 0), (51.6956, -45.9896, 0, 0),
               (29.3890, -21.4066, 0, 0), (44.0573, -37.2711, 0, 0),
               (44.1294, -37.3480, 0, 0), (30.7797, -23.2453, 0, 0),
               (21.4868, -13.6332, 0, 0), (8.5458, -0.5058, 0, 0))
    vs = _rows((3.6678, 0, -4.4475, 0), (0, 0, 0, 0),
               (8.14951, -1.5525, 0, 0), (12.90771, -21.1679, 27.7784, -14.0554),
               (20.53961, -16.2723, 0, 0), (33.51471, -30.9268, 0, 0),
               (17.70751, -13.5065, 0, 0), (24.97041, -21.3617, 0, 0),
               (25.00361, -21.3971, 0, 0), (15.34491, -11.1936, 0, 0),
               (6.21621, -1.7514, 0, 0), (5.85131, -1.3812, 0, 0))
    qmu = [84.6, -1, 312, 312, 312, 312, 143, 143, 143, 143, 80, 600]
    qkappa = [1327.7] + [57823] * 11
    return PolynomialStructure.isotropic(rmin, rmax, rho, vp, vs, qmu, qkappa, name="MIASP91")


def _ak135() -> PolynomialStructure:
    rmin = [0, 1217.5, 3479.5, 3631, 5611, 5711, 5961, 6161, 6251, 6336, 6351]
    rmax = [1217.5, 3479.5, 3631, 5611, 5711, 5961, 6161, 6251, 6336, 6351, 6371]
    rho = _rows((13.01224, -0.00072, -8.448571, 0), (12.27867, 1.206494, -10.135214, 0),
                (5.520665, -0.172417, 0, 0), (9.404821, -14.092113, 17.721033, -9.221153),
                (10.084566, -6.409226, 0, 0), (11.384761, -8.109009, 0, 0),
                (11.916663, -8.811093, 0, 0), (9.878741, -6.703708, 0, 0),
                (3.573402, -0.277326, 0, 0), (2.7142, 0, 0, 0), (2.449, 0, 0, 0))
    vp = _rows((11.261692, 0.028794, -6.627846, 0), (10.118851, 3.457774, -13.434875, 0),
               (13.908244, -0.45417, 0, 0), (24.138794, -37.097655, 46.631994, -24.272115),
               (25.969838, -16.934118, 0, 0), (29.38896, -21.40656, 0, 0),
               (30.78765, -23.25415, 0, 0), (25.413889, -17.697222, 0, 0),
               (8.785412, -0.749529, 0, 0), (6.5, 0, 0, 0), (5.8, 0, 0, 0))
    vs = _rows((3.667865, -0.001345, -4.440915, 0), (0, 0, 0, 0),
               (8.018341, -1.349895, 0, 0), (12.213901, -18.573085, 24.557329, -12.728015),
               (20.208945, -15.895645, 0, 0), (17.71732, -13.50652, 0, 0),
               (15.212335, -11.053685, 0, 0), (5.7502, -1.2742, 0, 0),
               (5.970824, -1.499059, 0, 0), (3.85, 0, 0, 0), (3.46, 0, 0, 0))
    qmu = [84.6, -1, 312, 312, 312, 143, 143, 80, 600, 600, 600]
    qkappa = [1327.7] + [57823] * 10
    return PolynomialStructure.isotropic(rmin, rmax, rho, vp, vs, qmu, qkappa, name="AK135")


def _homogen() -> PolynomialStructure:
    rmin = [0, 1221.5, 3480]
    rmax = [1221.5, 3480, 6371]
    rho = _rows((10, 0, 0, 0), (10, 0, 0, 0), (10, 0, 0, 0))
    vpv = _rows((1e-10, 17, 0, 0), (0, 17, 0, 0), (0, 17, 0, 0))
    vph = _rows((1e-10, 17.51, 0, 0), (0, 17.51, 0, 0), (0, 17.51, 0, 0))
    vsv = _rows((1e-10, 10, 0, 0), (0, 0, 0, 0), (0, 10, 0, 0))
    vsh = _rows((1e-10, 10.3, 0, 0), (0, 0, 0, 0), (0, 10.3, 0, 0))
    eta = _rows((1, 0, 0, 0), (1, 0, 0, 0), (1, 0, 0, 0))
    return PolynomialStructure(rmin, rmax, rho, vpv, vph, vsv, vsh, eta,
                               [84.6, -1, 600], [1327.7, 57823, 57823], name="HOMOGEN")


_STRUCTURE_MAP: Dict[str, Callable[[], PolynomialStructure]] = {
    "PREM": _prem,
    "IPREM": _iprem,
    "AK135": _ak135,
    "MIASP91": _miasp91,
    "IASP91": _iasp91,
    "HOMOGEN": _homogen,
}


def get_structure(name: str) -> PolynomialStructure:
    """
    按名称获取内置参考结构

    Raises:
        ConfigurationError: 未知结构名
    """
    key = str(name).strip().upper()
    if key not in _STRUCTURE_MAP:
        raise ConfigurationError(f"未知参考结构: {name}. 可选: {list(_STRUCTURE_MAP.keys())}")
    return _STRUCTURE_MAP[key]()


def resolve_structure(name_or_path: Union[str, Path, PolynomialStructure]) -> PolynomialStructure:
    """
    解析参考结构：已有实例直接返回；存在的文件路径按结构文件读取；否则按名称查找
    """
    if isinstance(name_or_path, PolynomialStructure):
        return name_or_path
    path = Path(name_or_path)
    if path.is_file():
        from ..io.structure_file import read_structure_file
        logger.debug("从文件读取参考结构: %s", path)
        return read_structure_file(path)
    return get_structure(str(name_or_path))
