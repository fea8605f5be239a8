# seismopert/core/types.py
'''
扰动后处理模块的基础类型
覆盖：空间位置 / 物理量枚举 / 未知参数 / 已知参数 / 反演方法
'''
from dataclasses import dataclass
from enum import Enum
from typing import List, Tuple, Union

import numpy as np

# 基础类型别名：兼容numpy数组/列表/元组
ArrayLike = Union[np.ndarray, List[float], Tuple[float, ...]]


# ========================================
# 空间位置
# ========================================
def _normalize_longitude(longitude: float, cross_date_line: bool = False) -> float:
    """经度归一化到 (-180, 180]；cross_date_line=True 时归一化到 [0, 360)"""
    lon = longitude % 360.0
    if not cross_date_line and lon > 180.0:
        lon -= 360.0
    return lon


@dataclass(frozen=True)
class Position:
    '''
    三维位置 (纬度, 经度, 半径)

    构造时纬度、经度四舍五入到 4 位小数，半径到 6 位小数，
    相等性与哈希均基于舍入后的三元组。
    '''
    latitude: float
    longitude: float
    radius: float

    def __post_init__(self):
        if not -90.0 <= self.latitude <= 90.0:
            raise ValueError(f"纬度应位于 [-90, 90]，当前 latitude={self.latitude}")
        if self.radius < 0:
            raise ValueError(f"半径不能为负，当前 radius={self.radius}")
        object.__setattr__(self, "latitude", round(float(self.latitude), 4))
        object.__setattr__(self, "longitude", round(_normalize_longitude(float(self.longitude)), 4))
        object.__setattr__(self, "radius", round(float(self.radius), 6))

    def to_line(self, cross_date_line: bool = False) -> str:
        """固定宽度文本：'%8.4f %9.4f %11.6f'"""
        lon = _normalize_longitude(self.longitude, cross_date_line)
        return f"{self.latitude:8.4f} {lon:9.4f} {self.radius:11.6f}"

    def __str__(self) -> str:
        return self.to_line()


# ========================================
# 物理量与参数类型
# ========================================
class VariableType(Enum):
    RHO = "RHO"
    Vp = "Vp"
    Vs = "Vs"
    Vb = "Vb"
    R = "R"
    LAMBDA = "LAMBDA"
    MU = "MU"
    LAMBDA2MU = "LAMBDA2MU"
    KAPPA = "KAPPA"
    Vpv = "Vpv"
    Vph = "Vph"
    Vsv = "Vsv"
    Vsh = "Vsh"
    ETA = "ETA"
    A = "A"
    C = "C"
    F = "F"
    L = "L"
    N = "N"
    XI = "XI"
    Qmu = "Qmu"
    Qkappa = "Qkappa"
    TIME = "TIME"

    @classmethod
    def of(cls, name: Union[str, "VariableType"]) -> "VariableType":
        """按名称（不区分大小写）解析物理量"""
        if isinstance(name, cls):
            return name
        key = str(name).strip().upper()
        for member in cls:
            if member.value.upper() == key:
                return member
        raise ValueError(f"未知物理量: {name}. 可选: {[m.value for m in cls]}")

    def __str__(self) -> str:
        return self.value


class ParameterType(Enum):
    SOURCE = "SOURCE"
    RECEIVER = "RECEIVER"
    LAYER = "LAYER"
    VOXEL = "VOXEL"

    def __str__(self) -> str:
        return self.value


class InverseMethod(Enum):
    """反演求解方法（批处理时用于定位结果文件夹）"""
    CG = "CG"
    SVD = "SVD"
    LSM = "LSM"
    NNLS = "NNLS"
    BCGS = "BCGS"
    FCG = "FCG"
    FCGD = "FCGD"
    NCG = "NCG"
    CCG = "CCG"

    @classmethod
    def of(cls, name: Union[str, "InverseMethod"]) -> "InverseMethod":
        if isinstance(name, cls):
            return name
        try:
            return cls[str(name).strip().upper()]
        except KeyError:
            raise ValueError(f"未知反演方法: {name}. 可选: {[m.value for m in cls]}") from None

    def __str__(self) -> str:
        return self.value


# ========================================
# 未知参数 / 已知参数
# ========================================
@dataclass(frozen=True)
class UnknownParameter:
    '''
    反演中的一个未知量：某体素（或层）上的某个物理量

    size 为体素体积或层厚，仅用于多重网格合并时累加。
    '''
    parameter_type: ParameterType
    variable_type: VariableType
    position: Position
    size: float

    def __str__(self) -> str:
        if self.parameter_type is ParameterType.LAYER:
            return f"{self.parameter_type} {self.variable_type} {self.position.radius} {self.size}"
        return f"{self.parameter_type} {self.variable_type} {self.position} {self.size}"


@dataclass(frozen=True)
class KnownParameter:
    """已求解的参数：未知参数 + 反演值"""
    parameter: UnknownParameter
    value: float

    @property
    def position(self) -> Position:
        return self.parameter.position

    @property
    def variable_type(self) -> VariableType:
        return self.parameter.variable_type

    def __str__(self) -> str:
        return f"{self.parameter} {self.value}"
