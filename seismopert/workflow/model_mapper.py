# seismopert/workflow/model_mapper.py
"""
单模型出图流程

读取已知参数 -> (可选) 逆融合 -> 构建扰动模型 -> (可选) 换算参考结构
-> 写出各物理量的百分比扰动列表与 GMT 脚本
"""
import logging
from pathlib import Path
from typing import Iterable, List, Optional, Tuple

import numpy as np

from ..config import default
from ..config.builder import MapperConfig, dump_config
from ..core.errors import ConfigurationError
from ..core.multigrid import MultigridDesign, reverse_fusion
from ..core.perturbation import PerturbationModel, build_model, rebase
from ..core.structure import PolynomialStructure, resolve_structure
from ..core.types import KnownParameter, Position
from ..io.multigrid_file import read_multigrid_design
from ..io.output import create_output_folder
from ..io.parameter_file import read_known_parameters, read_unknown_parameters
from ..io.perturbation_list import write_percent_for_type
from ..visualization.map_script import (
    MapRegion,
    PerturbationMapShellscript,
    decide_grid_interval,
    decide_map_region,
)

logger = logging.getLogger(__name__)


# ====================
# 辅助函数（单模型与批处理共用）
# ====================
def load_structures(config: MapperConfig) -> Tuple[PolynomialStructure, Optional[PolynomialStructure]]:
    """返回 (参考结构, 换算用的第二参考结构或 None)"""
    structure = resolve_structure(config.structure_source)
    reference_source = config.reference_structure_source
    reference = resolve_structure(reference_source) if reference_source is not None else None
    logger.info("参考结构: %s%s", structure.name,
                f"，换算到: {reference.name}" if reference is not None else "")
    return structure, reference


def load_multigrid(config: MapperConfig) -> Optional[MultigridDesign]:
    """读取多重网格设计；未配置或文件不存在时返回 None"""
    path = config.resolve(config.multigrid_path)
    if path is None:
        return None
    if not path.is_file():
        logger.warning("多重网格文件 %s 不存在，不做逆融合", path)
        return None
    design = read_multigrid_design(path)
    unknowns_path = config.resolve(config.unknowns_path)
    if unknowns_path is not None:
        if not unknowns_path.is_file():
            raise ConfigurationError(f"unknownsPath 不存在: {unknowns_path}")
        design.validate(read_unknown_parameters(unknowns_path))
    return design


def compute_model(knowns: List[KnownParameter], structure: PolynomialStructure,
                  reference: Optional[PolynomialStructure],
                  design: Optional[MultigridDesign]) -> PerturbationModel:
    if design is not None:
        knowns = reverse_fusion(knowns, design)
    model = build_model(knowns, structure)
    if reference is not None:
        model = rebase(model, reference)
    return model


def resolve_region(config: MapperConfig, positions: Iterable[Position]) -> MapRegion:
    """配置中给定区域则直接解析，否则由位置集合确定"""
    if config.map_region:
        try:
            return MapRegion.parse(config.map_region)
        except ValueError as exc:
            raise ConfigurationError(f"mapRegion 不合法: {exc}") from exc
    return decide_map_region(positions)


def select_radii(config: MapperConfig, radii) -> List[float]:
    """
    出图的半径切片：未设置 displayLayers 时为全部半径

    Raises:
        ConfigurationError: displayLayers 中的半径不在模型中
    """
    radii = sorted(float(r) for r in radii)
    if config.display_layers is None:
        return radii
    selected = []
    for layer in config.display_layers:
        matches = [r for r in radii if np.isclose(r, layer, rtol=0.0, atol=1e-6)]
        if not matches:
            raise ConfigurationError(f"displayLayers 中的半径 {layer} 不在模型中，可选: {radii}")
        selected.append(matches[0])
    return sorted(set(selected))


def check_boundaries(config: MapperConfig, radii) -> None:
    if config.boundaries is not None and len(config.boundaries) <= len(radii):
        raise ConfigurationError(
            f"boundaries 长度 ({len(config.boundaries)}) 应大于半径个数 ({len(radii)})")


def percent_file_root(variable) -> str:
    return f"{variable.value.lower()}Percent"


class ModelMapper:
    '''
    单模型出图

    Args:
        config: 运行配置，需设置 model_path
    '''

    def __init__(self, config: MapperConfig):
        self.config = config

    def run(self) -> Path:
        """
        执行并返回输出目录

        Raises:
            ConfigurationError: 配置或输入文件不合法（此时不产生任何输出）
            OutOfRangeError: 模型半径超出参考结构范围
        """
        cfg = self.config
        cfg.validate()

        structure, reference = load_structures(cfg)
        knowns = read_known_parameters(cfg.resolve(cfg.model_path))
        model = compute_model(knowns, structure, reference, load_multigrid(cfg))
        if len(model) == 0:
            raise ConfigurationError(f"{cfg.model_path} 中没有已知参数")
        radii = select_radii(cfg, model.radii)
        check_boundaries(cfg, radii)
        region = resolve_region(cfg, model.positions)
        grid_interval = decide_grid_interval(model.positions)

        out_path = create_output_folder(cfg.work_path, default.MODEL_MAP_ROOT, cfg.tag)
        dump_config(cfg, out_path / "_ModelMapper.yml")

        present = set(model.variable_types)
        for variable in cfg.variable_types:
            if variable not in present:
                logger.warning("模型中没有 %s 的扰动，输出文件为空", variable)
            file_root = percent_file_root(variable)
            write_percent_for_type(variable, model, out_path / f"{file_root}.lst",
                                   cross_date_line=region.cross_date_line)
            script = PerturbationMapShellscript(variable, radii, region, cfg.scale, file_root,
                                                cfg.boundaries, cfg.n_panels_per_row, grid_interval)
            script.write(out_path)
            logger.info("请在 %s 中运行 %sGrid.sh 与 %sMap.sh", out_path, file_root, file_root)

        logger.info("完成: %d 条扰动，%d 个半径切片，区域 %s", len(model), len(radii), region)
        return out_path
