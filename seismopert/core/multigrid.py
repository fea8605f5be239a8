# seismopert/core/multigrid.py
"""
多重网格设计与逆融合（reverse fusion）

反演时多个细网格体素可被合并为一个粗网格参数；后处理时需将粗网格的
求解值重新分配回其包含的每个细网格体素。
"""
import logging
from typing import Dict, Iterable, List, Sequence, Tuple

import numpy as np

from .errors import ConfigurationError
from .types import KnownParameter, Position, UnknownParameter

logger = logging.getLogger(__name__)


class MultigridDesign:
    '''
    多重网格设计：有序的 (细网格参数列表, 融合参数) 分组

    一个细网格参数只能属于一个分组，重叠分组在添加时即报错。
    '''

    def __init__(self):
        self._groups: List[Tuple[Tuple[UnknownParameter, ...], UnknownParameter]] = []
        self._owner: Dict[UnknownParameter, UnknownParameter] = {}
        self._by_fused: Dict[UnknownParameter, Tuple[UnknownParameter, ...]] = {}

    def add(self, originals: Sequence[UnknownParameter], fused: UnknownParameter) -> None:
        """添加一个分组"""
        originals = tuple(originals)
        if not originals:
            raise ConfigurationError(f"融合参数 {fused} 没有对应的细网格参数")
        for param in originals:
            if param.variable_type is not fused.variable_type:
                raise ConfigurationError(
                    f"细网格参数 {param} 与融合参数 {fused} 的物理量不一致")
            if param in self._owner:
                raise ConfigurationError(
                    f"细网格参数 {param} 同时属于多个融合参数: {self._owner[param]} 与 {fused}")
        if fused in self._by_fused:
            raise ConfigurationError(f"融合参数重复定义: {fused}")
        if len(set(originals)) != len(originals):
            raise ConfigurationError(f"融合参数 {fused} 的细网格参数存在重复")

        for param in originals:
            self._owner[param] = fused
        self._by_fused[fused] = originals
        self._groups.append((originals, fused))

    def add_fusion(self, *params: UnknownParameter) -> UnknownParameter:
        """
        将若干同类参数融合为一个参数：位置取经纬度与半径的平均，size 求和

        Returns:
            融合后的参数
        """
        if len(params) < 2:
            raise ValueError("至少需要两个参数才能融合")
        variable = params[0].variable_type
        if any(p.variable_type is not variable for p in params):
            raise ValueError("只能融合物理量相同的参数")
        ptype = params[0].parameter_type
        if any(p.parameter_type is not ptype for p in params):
            raise ValueError("只能融合参数类型相同的参数")

        lats = np.array([p.position.latitude for p in params])
        lons = np.array([p.position.longitude for p in params])
        radii = np.array([p.position.radius for p in params])
        position = Position(float(lats.mean()), float(lons.mean()), float(radii.mean()))
        fused = UnknownParameter(ptype, variable, position, float(sum(p.size for p in params)))
        self.add(params, fused)
        return fused

    # ====================
    # 查询
    # ====================
    @property
    def groups(self) -> List[Tuple[Tuple[UnknownParameter, ...], UnknownParameter]]:
        return list(self._groups)

    def fuses(self, param: UnknownParameter) -> bool:
        """该参数是否为某个分组的融合参数"""
        return param in self._by_fused

    def originals_of(self, fused: UnknownParameter) -> Tuple[UnknownParameter, ...]:
        return self._by_fused[fused]

    def validate(self, unknowns: Iterable[UnknownParameter]) -> None:
        """
        检查设计中的所有细网格参数都出现在原始未知参数列表中

        Raises:
            ConfigurationError: 设计引用了未定义的参数
        """
        defined = set(unknowns)
        missing = [p for p in self._owner if p not in defined]
        if missing:
            raise ConfigurationError(
                f"多重网格设计引用了 {len(missing)} 个未定义的参数，例如: {missing[0]}")

    def __len__(self) -> int:
        return len(self._groups)


def reverse_fusion(knowns: Iterable[KnownParameter], design: MultigridDesign) -> List[KnownParameter]:
    '''
    逆融合：融合参数的求解值展开到其每个细网格参数上

    Args:
        knowns: 已知参数列表（可包含融合参数与未融合参数）
        design: 多重网格设计

    Returns:
        展开后的已知参数列表；未融合参数原样保留，顺序与输入一致

    Raises:
        ValueError: 输出中出现重复的 (位置, 物理量)
    '''
    result: List[KnownParameter] = []
    seen = set()
    n_expanded = 0
    for known in knowns:
        if design.fuses(known.parameter):
            expanded = [KnownParameter(p, known.value) for p in design.originals_of(known.parameter)]
            n_expanded += 1
        else:
            expanded = [known]
        for item in expanded:
            key = (item.position, item.variable_type)
            if key in seen:
                raise ValueError(f"逆融合结果中 {item.variable_type} 在 {item.position} 处重复")
            seen.add(key)
            result.append(item)
    logger.debug("逆融合: %d 个融合参数展开，输出 %d 条记录", n_expanded, len(result))
    return result
