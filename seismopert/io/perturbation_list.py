# seismopert/io/perturbation_list.py
"""
扰动列表文件：每行 "<位置> <值>"

位置为固定宽度的 '纬度 经度 半径'，与下游 GMT 脚本中的 awk 列号对应。
"""
import logging
from pathlib import Path
from typing import Dict, Mapping

from ..core.perturbation import PerturbationModel
from ..core.types import Position, VariableType
from .reader import PathLike, read_information_lines

logger = logging.getLogger(__name__)


def write_perturbation_map(values: Mapping[Position, float], path: PathLike,
                           cross_date_line: bool = False) -> None:
    '''
    写出 位置 -> 值 映射

    Raises:
        OSError: 目标无法创建（如父目录不存在），不做重试
    '''
    with open(path, "w", encoding="utf-8") as f:
        for position, value in values.items():
            f.write(f"{position.to_line(cross_date_line)} {value}\n")
    logger.debug("写出 %d 行到 %s", len(values), path)


def write_percent_for_type(variable: VariableType, model: PerturbationModel, path: PathLike,
                           cross_date_line: bool = False) -> None:
    """按模型顺序写出某物理量的百分比扰动"""
    write_perturbation_map(model.percent_for_type(variable), path, cross_date_line)


def write_absolute_for_type(variable: VariableType, model: PerturbationModel, path: PathLike,
                            cross_date_line: bool = False) -> None:
    """按模型顺序写出某物理量的绝对扰动"""
    write_perturbation_map(model.absolute_for_type(variable), path, cross_date_line)


def read_perturbation_map(path: PathLike) -> Dict[Position, float]:
    """读取 '纬度 经度 半径 值' 格式的扰动列表"""
    path = Path(path)
    values = {}
    for line in read_information_lines(path):
        fields = line.split()
        if len(fields) != 4:
            raise ValueError(f"{path} 行应有 4 列，当前: '{line}'")
        lat, lon, r, value = map(float, fields)
        values[Position(lat, lon, r)] = value
    return values
