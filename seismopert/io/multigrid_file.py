# seismopert/io/multigrid_file.py
"""
多重网格设计文件

    # 注释
    - VOXEL Vs 10.0 20.0 6000.0 1.0    <- 细网格参数
    - VOXEL Vs 10.0 25.0 6000.0 1.0
    + VOXEL Vs 10.0 22.5 6000.0 2.0    <- 融合参数，结束当前分组
"""
import logging
from pathlib import Path

from ..core.errors import ConfigurationError
from ..core.multigrid import MultigridDesign
from .parameter_file import parse_unknown
from .reader import PathLike, read_information_lines

logger = logging.getLogger(__name__)


def read_multigrid_design(path: PathLike) -> MultigridDesign:
    """
    读取多重网格设计文件

    Raises:
        ConfigurationError: 行前缀不是 '-' 或 '+'，或文件以未闭合的分组结尾
    """
    path = Path(path)
    design = MultigridDesign()
    originals = []
    for line in read_information_lines(path):
        prefix, _, body = line.partition(" ")
        if prefix not in ("-", "+"):
            raise ConfigurationError(f"{path} 中无法识别的行: '{line}'")
        try:
            param = parse_unknown(body.split())
        except ValueError as exc:
            raise ConfigurationError(f"{path} 行格式错误: '{line}' ({exc})") from exc
        if prefix == "-":
            originals.append(param)
        else:
            design.add(originals, param)
            originals = []
    if originals:
        raise ConfigurationError(f"{path} 末尾有 {len(originals)} 个细网格参数没有对应的融合参数")
    logger.info("读取多重网格设计 %s: %d 个融合参数", path, len(design))
    return design


def write_multigrid_design(design: MultigridDesign, path: PathLike) -> None:
    with open(path, "w", encoding="utf-8") as f:
        for i, (originals, fused) in enumerate(design.groups, 1):
            f.write(f"#{i}\n")
            for param in originals:
                f.write(f"- {param}\n")
            f.write(f"+ {fused}\n")
