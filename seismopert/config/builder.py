# seismopert/config/builder.py
"""
运行配置：MapperConfig 数据类 + 链式构建器 + YAML 读写

YAML 键名沿用 camelCase（workPath, modelPath, structureName ...），
在 MapperConfig 中对应 snake_case 属性。
"""
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml

from ..core.errors import ConfigurationError
from ..core.types import InverseMethod, VariableType
from . import default

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

# YAML 键 -> 属性名
_KEY_MAP = {
    "workPath": "work_path",
    "tag": "tag",
    "modelPath": "model_path",
    "resultPath": "result_path",
    "structurePath": "structure_path",
    "structureName": "structure_name",
    "referenceStructurePath": "reference_structure_path",
    "referenceStructureName": "reference_structure_name",
    "multigridPath": "multigrid_path",
    "unknownsPath": "unknowns_path",
    "variableTypes": "variable_types",
    "inverseMethods": "inverse_methods",
    "maxNum": "max_num",
    "mapRegion": "map_region",
    "scale": "scale",
    "boundaries": "boundaries",
    "displayLayers": "display_layers",
    "nPanelsPerRow": "n_panels_per_row",
}


@dataclass
class MapperConfig:
    work_path: Path = Path(".")
    tag: Optional[str] = None
    model_path: Optional[Path] = None
    result_path: Optional[Path] = None
    structure_path: Optional[Path] = None
    structure_name: str = default.DEFAULT_STRUCTURE_NAME
    reference_structure_path: Optional[Path] = None
    reference_structure_name: Optional[str] = None
    multigrid_path: Optional[Path] = None
    unknowns_path: Optional[Path] = None
    variable_types: List[VariableType] = field(
        default_factory=lambda: [VariableType.of(v) for v in default.DEFAULT_VARIABLE_TYPES])
    inverse_methods: List[InverseMethod] = field(
        default_factory=lambda: [InverseMethod.of(m) for m in default.DEFAULT_INVERSE_METHODS])
    max_num: int = default.DEFAULT_MAX_NUM
    map_region: Optional[str] = None
    scale: float = default.DEFAULT_SCALE
    boundaries: Optional[List[float]] = None
    display_layers: Optional[List[float]] = None
    n_panels_per_row: int = default.DEFAULT_PANELS_PER_ROW

    # ====================
    # 路径解析
    # ====================
    def resolve(self, path: Optional[PathLike]) -> Optional[Path]:
        """相对路径以 work_path 为基准"""
        if path is None:
            return None
        path = Path(path)
        return path if path.is_absolute() else Path(self.work_path) / path

    @property
    def structure_source(self) -> Union[Path, str]:
        """参考结构：文件优先，否则为结构名"""
        if self.structure_path is not None:
            return self.resolve(self.structure_path)
        return self.structure_name

    @property
    def reference_structure_source(self) -> Optional[Union[Path, str]]:
        """换算用的第二参考结构，未设置时为 None"""
        if self.reference_structure_path is not None:
            return self.resolve(self.reference_structure_path)
        return self.reference_structure_name

    def validate(self, batch: bool = False) -> None:
        """
        检查配置

        Args:
            batch: True 时检查 result_path（批处理），否则检查 model_path

        Raises:
            ConfigurationError: 必需文件缺失或参数非法
        """
        if not Path(self.work_path).is_dir():
            raise ConfigurationError(f"workPath 不存在: {self.work_path}")
        if batch:
            if self.result_path is None:
                raise ConfigurationError("批处理需要设置 resultPath")
            if not self.resolve(self.result_path).is_dir():
                raise ConfigurationError(f"resultPath 不存在: {self.resolve(self.result_path)}")
            if self.max_num < 1:
                raise ConfigurationError(f"maxNum 应 >= 1，当前 {self.max_num}")
            if not self.inverse_methods:
                raise ConfigurationError("inverseMethods 不能为空")
        else:
            if self.model_path is None:
                raise ConfigurationError("需要设置 modelPath")
            if not self.resolve(self.model_path).is_file():
                raise ConfigurationError(f"modelPath 不存在: {self.resolve(self.model_path)}")
        if self.structure_path is not None and not self.resolve(self.structure_path).is_file():
            raise ConfigurationError(f"structurePath 不存在: {self.resolve(self.structure_path)}")
        if (self.reference_structure_path is not None
                and not self.resolve(self.reference_structure_path).is_file()):
            raise ConfigurationError(
                f"referenceStructurePath 不存在: {self.resolve(self.reference_structure_path)}")
        if not self.variable_types:
            raise ConfigurationError("variableTypes 不能为空")
        if self.display_layers is not None and not self.display_layers:
            raise ConfigurationError("displayLayers 不能为空列表")
        if self.scale <= 0:
            raise ConfigurationError(f"scale 应为正数，当前 {self.scale}")
        if self.n_panels_per_row < 1:
            raise ConfigurationError(f"nPanelsPerRow 应 >= 1，当前 {self.n_panels_per_row}")

    def to_dict(self) -> Dict[str, Any]:
        """转换为 YAML 键名的字典（省略未设置的项）"""
        out = {}
        for key, attr in _KEY_MAP.items():
            value = getattr(self, attr)
            if value is None:
                continue
            if isinstance(value, Path):
                value = str(value)
            elif attr in ("variable_types", "inverse_methods"):
                value = [v.value for v in value]
            elif attr in ("boundaries", "display_layers"):
                value = [float(b) for b in value]
            out[key] = value
        return out


class MapperConfigBuilder:
    '''
    链式构建 MapperConfig

    示例：
        cfg = (MapperConfigBuilder()
               .set_model_path("model.lst")
               .set_variable_types(["Vs", "Vp"])
               .build())
    '''

    def __init__(self):
        self._config = MapperConfig()

    def set_work_path(self, path: PathLike):
        self._config.work_path = Path(path)
        return self

    def set_tag(self, tag: Optional[str]):
        self._config.tag = str(tag) if tag else None
        return self

    def set_model_path(self, path: PathLike):
        self._config.model_path = Path(path)
        return self

    def set_result_path(self, path: PathLike):
        self._config.result_path = Path(path)
        return self

    def set_structure_path(self, path: PathLike):
        self._config.structure_path = Path(path)
        return self

    def set_structure_name(self, name: str):
        self._config.structure_name = str(name)
        return self

    def set_reference_structure_path(self, path: PathLike):
        self._config.reference_structure_path = Path(path)
        return self

    def set_reference_structure_name(self, name: str):
        self._config.reference_structure_name = str(name)
        return self

    def set_multigrid_path(self, path: PathLike):
        self._config.multigrid_path = Path(path)
        return self

    def set_unknowns_path(self, path: PathLike):
        self._config.unknowns_path = Path(path)
        return self

    def set_variable_types(self, variables: Union[str, List[Union[str, VariableType]]]):
        if isinstance(variables, str):
            variables = variables.split()
        self._config.variable_types = [VariableType.of(v) for v in variables]
        return self

    def set_inverse_methods(self, methods: Union[str, List[Union[str, InverseMethod]]]):
        if isinstance(methods, str):
            methods = methods.split()
        self._config.inverse_methods = [InverseMethod.of(m) for m in methods]
        return self

    def set_max_num(self, max_num: int):
        self._config.max_num = int(max_num)
        return self

    def set_map_region(self, region: Optional[str]):
        self._config.map_region = str(region) if region else None
        return self

    def set_scale(self, scale: float):
        self._config.scale = float(scale)
        return self

    def set_boundaries(self, boundaries: Union[str, List[float]]):
        if isinstance(boundaries, str):
            boundaries = boundaries.split()
        self._config.boundaries = [float(b) for b in boundaries]
        return self

    def set_display_layers(self, radii: Union[str, List[float]]):
        """只为这些半径 [km] 出图"""
        if isinstance(radii, str):
            radii = radii.split()
        self._config.display_layers = [float(r) for r in radii]
        return self

    def set_panels_per_row(self, n: int):
        self._config.n_panels_per_row = int(n)
        return self

    def build(self) -> MapperConfig:
        return self._config


_SETTERS = {
    "workPath": MapperConfigBuilder.set_work_path,
    "tag": MapperConfigBuilder.set_tag,
    "modelPath": MapperConfigBuilder.set_model_path,
    "resultPath": MapperConfigBuilder.set_result_path,
    "structurePath": MapperConfigBuilder.set_structure_path,
    "structureName": MapperConfigBuilder.set_structure_name,
    "referenceStructurePath": MapperConfigBuilder.set_reference_structure_path,
    "referenceStructureName": MapperConfigBuilder.set_reference_structure_name,
    "multigridPath": MapperConfigBuilder.set_multigrid_path,
    "unknownsPath": MapperConfigBuilder.set_unknowns_path,
    "variableTypes": MapperConfigBuilder.set_variable_types,
    "inverseMethods": MapperConfigBuilder.set_inverse_methods,
    "maxNum": MapperConfigBuilder.set_max_num,
    "mapRegion": MapperConfigBuilder.set_map_region,
    "scale": MapperConfigBuilder.set_scale,
    "boundaries": MapperConfigBuilder.set_boundaries,
    "displayLayers": MapperConfigBuilder.set_display_layers,
    "nPanelsPerRow": MapperConfigBuilder.set_panels_per_row,
}


def config_from_dict(data: Dict[str, Any]) -> MapperConfig:
    """
    由 camelCase 键的字典构建配置

    Raises:
        ConfigurationError: 未知键或取值非法
    """
    unknown = [k for k in data if k not in _SETTERS]
    if unknown:
        raise ConfigurationError(f"未知配置项: {unknown}. 可选: {list(_SETTERS.keys())}")
    builder = MapperConfigBuilder()
    for key, value in data.items():
        if value is None:
            continue
        try:
            _SETTERS[key](builder, value)
        except (TypeError, ValueError) as exc:
            raise ConfigurationError(f"配置项 {key}={value!r} 不合法: {exc}") from exc
    return builder.build()


def load_config(path: PathLike) -> MapperConfig:
    """从 YAML 文件读取配置"""
    path = Path(path)
    if not path.is_file():
        raise ConfigurationError(f"找不到配置文件: {path}")
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"配置文件 {path} 顶层应为映射")
    logger.debug("读取配置 %s: %s", path, data)
    return config_from_dict(data)


def dump_config(config: MapperConfig, path: PathLike) -> None:
    """将配置写为 YAML"""
    with open(path, "w", encoding="utf-8") as f:
        yaml.safe_dump(config.to_dict(), f, allow_unicode=True, sort_keys=False)
