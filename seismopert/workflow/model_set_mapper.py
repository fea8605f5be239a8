# seismopert/workflow/model_set_mapper.py
"""
批处理出图：反演方法 × 基向量数 1..maxNum

结果目录结构：
    <resultPath>/unknowns.lst          (可选，用于确定半径与区域)
    <resultPath>/CG/CG1.lst ... CG<maxNum>.lst
    <resultPath>/SVD/SVD1.lst ...
输出目录 modelMaps[_tag]_<时间戳>/<METHOD><k>/<var>Percent.lst
"""
import logging
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from ..config import default
from ..config.builder import MapperConfig, dump_config
from ..core.errors import ConfigurationError
from ..core.perturbation import PerturbationModel
from ..core.types import InverseMethod, Position
from ..io.output import create_output_folder
from ..io.parameter_file import read_known_parameters, read_unknown_parameters
from ..io.perturbation_list import write_percent_for_type
from ..visualization.map_script import (
    PerturbationMapShellscript,
    decide_grid_interval,
    write_parent_shellscript,
)
from .model_mapper import (
    check_boundaries,
    compute_model,
    load_multigrid,
    load_structures,
    percent_file_root,
    resolve_region,
    select_radii,
)

logger = logging.getLogger(__name__)


class ModelSetMapper:
    '''
    批处理出图

    缺少结果目录的反演方法记录警告后跳过；已存在的方法必须包含全部
    <METHOD>1..<METHOD><maxNum> 结果文件。
    '''

    def __init__(self, config: MapperConfig):
        self.config = config

    def _answer_files(self, result_path: Path) -> Dict[InverseMethod, List[Path]]:
        found = {}
        for method in self.config.inverse_methods:
            folder = result_path / method.value
            if not folder.is_dir():
                logger.warning("Results for %s do not exist, skipping.", method.value)
                continue
            files = [folder / f"{method.value}{k}.lst" for k in range(1, self.config.max_num + 1)]
            missing = [f for f in files if not f.is_file()]
            if missing:
                raise ConfigurationError(f"{method.value} 缺少 {len(missing)} 个结果文件，例如 {missing[0]}")
            found[method] = files
        return found

    def _positions(self, result_path: Path, models, design) -> List[Position]:
        """优先使用 unknowns.lst（逆融合后）的位置，否则取所有模型的位置"""
        unknowns_path = self.config.resolve(self.config.unknowns_path) or result_path / default.UNKNOWNS_FILE_NAME
        if unknowns_path.is_file():
            positions = []
            for param in read_unknown_parameters(unknowns_path):
                if design is not None and design.fuses(param):
                    positions.extend(p.position for p in design.originals_of(param))
                else:
                    positions.append(param.position)
            return list(dict.fromkeys(positions))
        return list(dict.fromkeys(p for model in models.values() for p in model.positions))

    def run(self) -> Optional[Path]:
        """
        执行并返回输出目录；没有任何方法的结果时返回 None

        Raises:
            ConfigurationError: 配置或输入文件不合法（此时不产生任何输出）
        """
        cfg = self.config
        cfg.validate(batch=True)
        result_path = cfg.resolve(cfg.result_path)

        answer_files = self._answer_files(result_path)
        if not answer_files:
            logger.warning("%s 中没有任何反演方法的结果", result_path)
            return None

        structure, reference = load_structures(cfg)
        design = load_multigrid(cfg)
        models: Dict[Tuple[InverseMethod, int], PerturbationModel] = {}
        for method, files in answer_files.items():
            for k, path in enumerate(files, 1):
                models[(method, k)] = compute_model(read_known_parameters(path), structure, reference, design)

        positions = self._positions(result_path, models, design)
        if not positions:
            raise ConfigurationError(f"{result_path} 中的结果不包含任何位置")
        radii = select_radii(cfg, {p.radius for p in positions})
        check_boundaries(cfg, radii)
        region = resolve_region(cfg, positions)
        grid_interval = decide_grid_interval(positions)

        out_path = create_output_folder(cfg.work_path, default.MODEL_SET_MAP_ROOT, cfg.tag)
        dump_config(cfg, out_path / "_ModelSetMapper.yml")

        for (method, k), model in models.items():
            sub = out_path / f"{method.value}{k}"
            sub.mkdir()
            for variable in cfg.variable_types:
                write_percent_for_type(variable, model, sub / f"{percent_file_root(variable)}.lst",
                                       cross_date_line=region.cross_date_line)

        methods = list(answer_files)
        for variable in cfg.variable_types:
            file_root = percent_file_root(variable)
            write_parent_shellscript(variable, methods, cfg.max_num, out_path)
            PerturbationMapShellscript(variable, radii, region, cfg.scale, file_root,
                                       cfg.boundaries, cfg.n_panels_per_row, grid_interval).write(out_path)
            logger.info("请在 %s 中运行 %sAllMap.sh", out_path, file_root)

        logger.info("完成: %d 个方法 × %d 个模型，区域 %s",
                    len(methods), cfg.max_num, region)
        return out_path
