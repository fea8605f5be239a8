# seismopert/io/parameter_file.py
"""
未知/已知参数列表文件

每行一个参数：
    VOXEL <物理量> 纬度 经度 半径 size [值]
    LAYER <物理量> 半径 size [值]
已知参数文件在末尾多一列求解值。
"""
import logging
from pathlib import Path
from typing import Iterable, List, Sequence

from ..core.types import KnownParameter, ParameterType, Position, UnknownParameter, VariableType
from .reader import PathLike, read_information_lines

logger = logging.getLogger(__name__)

_N_FIELDS = {ParameterType.VOXEL: 6, ParameterType.LAYER: 4}


def parse_unknown(fields: Sequence[str]) -> UnknownParameter:
    """由字段列表解析未知参数（不含求解值）"""
    ptype = ParameterType(fields[0].upper())
    if ptype not in _N_FIELDS:
        raise ValueError(f"不支持的参数类型: {ptype}")
    if len(fields) != _N_FIELDS[ptype]:
        raise ValueError(f"{ptype} 参数应有 {_N_FIELDS[ptype]} 个字段，当前 {len(fields)}: {' '.join(fields)}")
    variable = VariableType.of(fields[1])
    if ptype is ParameterType.VOXEL:
        lat, lon, r, size = map(float, fields[2:6])
        return UnknownParameter(ptype, variable, Position(lat, lon, r), size)
    r, size = map(float, fields[2:4])
    return UnknownParameter(ptype, variable, Position(0.0, 0.0, r), size)


def _warn_duplicates(params: Iterable[UnknownParameter], path: Path) -> None:
    seen = set()
    for param in params:
        if param in seen:
            logger.warning("%s 中存在重复参数: %s", path, param)
        seen.add(param)


def read_unknown_parameters(path: PathLike) -> List[UnknownParameter]:
    """读取未知参数文件"""
    path = Path(path)
    params = []
    for line in read_information_lines(path):
        try:
            params.append(parse_unknown(line.split()))
        except ValueError as exc:
            raise ValueError(f"{path} 行格式错误: '{line}' ({exc})") from exc
    _warn_duplicates(params, path)
    logger.debug("从 %s 读取 %d 个未知参数", path, len(params))
    return params


def read_known_parameters(path: PathLike) -> List[KnownParameter]:
    """读取已知参数文件（最后一列为求解值）"""
    path = Path(path)
    knowns = []
    for line in read_information_lines(path):
        fields = line.split()
        try:
            knowns.append(KnownParameter(parse_unknown(fields[:-1]), float(fields[-1])))
        except (ValueError, IndexError) as exc:
            raise ValueError(f"{path} 行格式错误: '{line}' ({exc})") from exc
    _warn_duplicates((k.parameter for k in knowns), path)
    logger.debug("从 %s 读取 %d 个已知参数", path, len(knowns))
    return knowns


def write_unknown_parameters(params: Iterable[UnknownParameter], path: PathLike) -> None:
    with open(path, "w", encoding="utf-8") as f:
        for param in params:
            f.write(f"{param}\n")


def write_known_parameters(knowns: Iterable[KnownParameter], path: PathLike) -> None:
    with open(path, "w", encoding="utf-8") as f:
        for known in knowns:
            f.write(f"{known}\n")
