# seismopert/core/__init__.py
"""
seismopert 核心模块：参考结构、多重网格逆融合与扰动模型
"""

from .errors import ConfigurationError, OutOfRangeError, SeismopertError
from .types import (
    ArrayLike,
    InverseMethod,
    KnownParameter,
    ParameterType,
    Position,
    UnknownParameter,
    VariableType,
)
from .elastic import ElasticMedium
from .structure import PolynomialStructure, get_structure, resolve_structure
from .multigrid import MultigridDesign, reverse_fusion
from .perturbation import PerturbationEntry, PerturbationModel, build_model, rebase

__all__ = [
    # 异常
    "SeismopertError",
    "ConfigurationError",
    "OutOfRangeError",
    # 基础类型
    "ArrayLike",
    "Position",
    "VariableType",
    "ParameterType",
    "InverseMethod",
    "UnknownParameter",
    "KnownParameter",
    # 参考结构
    "ElasticMedium",
    "PolynomialStructure",
    "get_structure",
    "resolve_structure",
    # 多重网格
    "MultigridDesign",
    "reverse_fusion",
    # 扰动模型
    "PerturbationEntry",
    "PerturbationModel",
    "build_model",
    "rebase",
]
