# seismopert/core/perturbation.py
"""
扰动模型：已知参数 + 参考结构 -> 绝对扰动与百分比扰动

    percent = absolute / reference * 100

更换参考结构（rebase）时保持 reference + absolute 的物理总值不变：
    new_absolute = absolute + (reference - new_reference)
    new_percent  = new_absolute / new_reference * 100
"""
import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Tuple

import numpy as np

from .structure import PolynomialStructure
from .types import KnownParameter, Position, VariableType

logger = logging.getLogger(__name__)

EntryKey = Tuple[Position, VariableType]


@dataclass(frozen=True)
class PerturbationEntry:
    """某位置某物理量的扰动"""
    position: Position
    variable_type: VariableType
    absolute: float
    reference: float

    def __post_init__(self):
        if self.reference == 0:
            raise ValueError(
                f"{self.variable_type} 在 {self.position} 处的参考值为 0，无法计算百分比扰动")

    @property
    def percent(self) -> float:
        return self.absolute / self.reference * 100


class PerturbationModel:
    '''
    扰动模型（只读），按构建时的插入顺序迭代

    Args:
        entries: 扰动条目
        structure: 计算参考值所用的参考结构
    '''

    def __init__(self, entries: Iterable[PerturbationEntry], structure: PolynomialStructure):
        table: Dict[EntryKey, PerturbationEntry] = {}
        for entry in entries:
            key = (entry.position, entry.variable_type)
            if key in table:
                raise ValueError(f"{entry.variable_type} 在 {entry.position} 处重复")
            table[key] = entry
        self._entries = table
        self.structure = structure

    @property
    def entries(self) -> List[PerturbationEntry]:
        return list(self._entries.values())

    def get(self, position: Position, variable: VariableType) -> PerturbationEntry:
        return self._entries[(position, VariableType.of(variable))]

    @property
    def variable_types(self) -> List[VariableType]:
        return list(dict.fromkeys(e.variable_type for e in self._entries.values()))

    @property
    def positions(self) -> List[Position]:
        """不重复的位置（保持首次出现顺序）"""
        return list(dict.fromkeys(e.position for e in self._entries.values()))

    @property
    def radii(self) -> np.ndarray:
        """不重复的半径，升序"""
        return np.unique([p.radius for p in self.positions])

    def percent_for_type(self, variable: VariableType) -> Dict[Position, float]:
        variable = VariableType.of(variable)
        return {e.position: e.percent for e in self._entries.values() if e.variable_type is variable}

    def absolute_for_type(self, variable: VariableType) -> Dict[Position, float]:
        variable = VariableType.of(variable)
        return {e.position: e.absolute for e in self._entries.values() if e.variable_type is variable}

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self):
        return iter(self._entries.values())


def build_model(knowns: Iterable[KnownParameter], structure: PolynomialStructure) -> PerturbationModel:
    '''
    由已知参数构建扰动模型

    Args:
        knowns: 已知参数，其值视为相对参考结构的绝对扰动
        structure: 参考结构

    Returns:
        PerturbationModel

    Raises:
        OutOfRangeError: 某位置半径超出参考结构范围
        ValueError: (位置, 物理量) 重复或参考值为 0
    '''
    entries = [
        PerturbationEntry(k.position, k.variable_type, float(k.value),
                          structure.value_at(k.variable_type, k.position.radius))
        for k in knowns
    ]
    model = PerturbationModel(entries, structure)
    logger.debug("基于 %s 构建扰动模型: %d 条", structure.name, len(model))
    return model


def rebase(model: PerturbationModel, new_structure: PolynomialStructure) -> PerturbationModel:
    '''
    将扰动模型换算到另一参考结构

    新结构与原结构相同（逐系数相等）时直接返回原模型。

    Raises:
        OutOfRangeError: 某位置半径超出新参考结构范围
    '''
    if new_structure == model.structure:
        return model
    entries = []
    for entry in model:
        new_reference = new_structure.value_at(entry.variable_type, entry.position.radius)
        new_absolute = entry.absolute + (entry.reference - new_reference)
        entries.append(PerturbationEntry(entry.position, entry.variable_type, new_absolute, new_reference))
    logger.info("扰动模型参考结构由 %s 换为 %s", model.structure.name, new_structure.name)
    return PerturbationModel(entries, new_structure)
