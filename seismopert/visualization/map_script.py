# seismopert/visualization/map_script.py
"""
扰动分布图的 GMT 脚本生成

对每个物理量生成：
    <root>Grid.sh   按半径切片，xyz2grd + grdsample 生成网格
    <root>Map.sh    每个半径一个面板，grdimage + pscoast，最后输出 pdf/png
    cp_master.cpt   色标模板
批处理时另生成 <var>PercentAllMap.sh，在每个结果子目录中依次调用上面两个脚本。
"""
import logging
import math
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional, Sequence

import numpy as np

from ..config import default
from ..core.types import InverseMethod, Position, VariableType
from ..io.reader import PathLike

logger = logging.getLogger(__name__)


# ========================================
# 地图区域
# ========================================
@dataclass(frozen=True)
class MapRegion:
    lon_min: float
    lon_max: float
    lat_min: float
    lat_max: float

    def __post_init__(self):
        if not (self.lon_min < self.lon_max and self.lat_min < self.lat_max):
            raise ValueError(f"地图区域上下界不合法: {self}")
        if self.lat_min < -90 or self.lat_max > 90:
            raise ValueError(f"纬度应位于 [-90, 90]: {self.lat_min}/{self.lat_max}")
        if self.lon_min < -180 or self.lon_max > 360:
            raise ValueError(f"经度应位于 [-180, 360]: {self.lon_min}/{self.lon_max}")

    def __str__(self) -> str:
        return f"{self.lon_min:g}/{self.lon_max:g}/{self.lat_min:g}/{self.lat_max:g}"

    @classmethod
    def parse(cls, text: str) -> "MapRegion":
        """解析 'lonMin/lonMax/latMin/latMax'"""
        text = str(text).strip()
        if text.startswith("-R"):
            text = text[2:]
        parts = text.split("/")
        if len(parts) != 4:
            raise ValueError(f"地图区域应为 lonMin/lonMax/latMin/latMax，当前: {text}")
        return cls(*(float(p) for p in parts))

    @property
    def cross_date_line(self) -> bool:
        """区域跨越日期变更线时经度按 [0, 360) 表示"""
        return self.lon_max > 180

    def encloses(self, position: Position) -> bool:
        lon = position.longitude % 360.0 if self.cross_date_line else position.longitude
        return (self.lon_min <= lon <= self.lon_max
                and self.lat_min <= position.latitude <= self.lat_max)


def crosses_date_line(longitudes: Iterable[float]) -> bool:
    '''
    经度集合是否跨越日期变更线

    相邻经度之间的最大空隙不是跨越 ±180° 的那一段时，点集占据的弧段包含日期变更线。
    '''
    lons = np.unique(np.mod(np.asarray(list(longitudes), dtype=float) + 180.0, 360.0) - 180.0)
    if lons.size < 2:
        return False
    wrap_gap = lons[0] + 360.0 - lons[-1]
    return bool(np.diff(lons).max() > wrap_gap)


def decide_map_region(positions: Iterable[Position],
                      interval: int = default.MAP_SIZE_INTERVAL,
                      rim: int = default.MAP_RIM) -> MapRegion:
    '''
    根据位置集合确定地图区域

    上下界先取整到 interval 的倍数，再向外扩 rim，纬度截断到 [-90, 90]。
    经度截断到 [-180, 180]；点集跨越日期变更线时改用 [0, 360]。

    Raises:
        ValueError: 位置集合为空
    '''
    positions = list(positions)
    if not positions:
        raise ValueError("位置集合为空，无法确定地图区域")
    lats = np.array([p.latitude for p in positions])
    lons = np.array([p.longitude for p in positions])

    def bounds(values: np.ndarray, lower: float, upper: float):
        low = math.floor(values.min() / interval) * interval - rim
        high = math.ceil(values.max() / interval) * interval + rim
        return max(low, lower), min(high, upper)

    if crosses_date_line(lons):
        lon_min, lon_max = bounds(np.mod(lons, 360.0), 0, 360)
    else:
        lon_min, lon_max = bounds(lons, -180, 180)
    lat_min, lat_max = bounds(lats, -90, 90)
    region = MapRegion(lon_min, lon_max, lat_min, lat_max)
    logger.debug("地图区域: %s", region)
    return region


# ========================================
# 网格间隔
# ========================================
def _min_spacing(values: np.ndarray) -> Optional[float]:
    distinct = np.unique(np.round(values, 4))
    if distinct.size < 2:
        return None
    return float(np.diff(distinct).min())


def decide_grid_interval(positions: Iterable[Position]) -> float:
    """
    xyz2grd 网格间隔：取相邻纬度的最小间距（纬度只有一个值时用经度），
    无法确定时用默认值
    """
    positions = list(positions)
    lats = np.array([p.latitude for p in positions])
    lons = np.array([p.longitude for p in positions])
    if crosses_date_line(lons):
        lons = np.mod(lons, 360.0)
    spacing = _min_spacing(lats) if lats.size else None
    if spacing is None and lons.size:
        spacing = _min_spacing(lons)
    return round(spacing, 4) if spacing is not None else float(default.GRID_INTERVAL)


def decide_smooth_interval(grid_interval: float) -> float:
    """grdsample 重采样间隔：grid_interval / SMOOTHING_FACTOR 向下取到 1/2/5 x 10^n"""
    raw = grid_interval / default.SMOOTHING_FACTOR
    power = math.floor(math.log10(raw))
    mantissa = raw / 10 ** power
    step = 5 if mantissa >= 5 else 2 if mantissa >= 2 else 1
    return step * 10 ** power


# ========================================
# 单个物理量的 Grid / Map 脚本
# ========================================
def _shell_radius(radius: float) -> str:
    """与 Grid.sh 中 ${depth%.0} 得到的文件名一致"""
    text = repr(float(radius))
    return text[:-2] if text.endswith(".0") else text


def cpt_lines() -> List[str]:
    """红-白-蓝 17 色色标，范围 [-3.5, 3.5]，由 makecpt 再缩放"""
    red = np.array([129, 14, 30])
    white = np.array([253, 253, 253])
    blue = np.array([17, 46, 85])
    edges = np.linspace(-3.5, 3.5, 18)
    lines = []
    for k in range(17):
        if k < 8:
            color = red + (white - red) * k / 8
        else:
            color = white + (blue - white) * (k - 8) / 8
        r, g, b = (int(round(c)) for c in color)
        lo, hi = float(edges[k]), float(edges[k + 1])
        lines.append(f"{lo!r} {r} {g}  {b} {hi!r} {r} {g}  {b}")
    lines += ["B 129 14 30", "F 17 46 85", "N 255 255 255"]
    return lines


class PerturbationMapShellscript:
    '''
    某物理量扰动图的 GMT 脚本

    Args:
        variable: 物理量
        radii: 切片半径（任意顺序，内部升序）
        region: 地图区域
        scale: 色标范围 ±scale (%)
        file_root: 文件名前缀，如 'vsPercent'（读取 <file_root>.lst）
        boundaries: 面板标题用的深度边界 [km]，长度需大于半径个数
        n_panels_per_row: 每行面板数
        grid_interval: xyz2grd 网格间隔 [deg]，默认 GRID_INTERVAL；重采样间隔由其导出
    '''

    def __init__(self, variable: VariableType, radii: Sequence[float], region: MapRegion,
                 scale: float, file_root: str, boundaries: Optional[Sequence[float]] = None,
                 n_panels_per_row: int = default.DEFAULT_PANELS_PER_ROW,
                 grid_interval: Optional[float] = None):
        self.variable = VariableType.of(variable)
        self.radii = sorted(float(r) for r in radii)
        if not self.radii:
            raise ValueError("半径列表为空")
        if boundaries is not None and len(boundaries) <= len(self.radii):
            raise ValueError(
                f"boundaries 长度 ({len(boundaries)}) 应大于半径个数 ({len(self.radii)})")
        self.region = region
        self.scale = float(scale)
        self.file_root = file_root
        self.boundaries = list(boundaries) if boundaries is not None else None
        self.n_panels_per_row = int(n_panels_per_row)
        self.grid_interval = float(grid_interval) if grid_interval is not None else float(default.GRID_INTERVAL)
        if self.grid_interval <= 0:
            raise ValueError(f"grid_interval 应为正数，当前 {grid_interval}")
        self.smooth_interval = decide_smooth_interval(self.grid_interval)

    def _title(self, index: int, radius: float) -> str:
        if self.boundaries is None:
            return f"r={_shell_radius(radius)} km"
        return f"{self.boundaries[index]:g}-{self.boundaries[index + 1]:g} km"

    def grid_lines(self) -> List[str]:
        depths = " ".join(repr(r) for r in self.radii)
        return [
            "#!/bin/sh",
            "",
            f"for depth in {depths}",
            "do",
            "    dep=${depth%.0}",
            f"    grep \"$depth\" {self.file_root}.lst | \\",
            "    awk '{print $2,$1,$4}' | \\",
            f"    gmt xyz2grd -G$dep.grd -R{self.region} -I{self.grid_interval:g} -di0",
            f"    gmt grdsample $dep.grd -G$dep\\smooth.grd -I{self.smooth_interval:g}",
            "done",
        ]

    def map_lines(self) -> List[str]:
        per_row = self.n_panels_per_row
        var = self.variable.value
        lines = [
            "#!/bin/sh",
            "",
            "# GMT options",
            "gmt set COLOR_MODEL RGB",
            "gmt set PS_MEDIA 3000x6000",
            "gmt set PS_PAGE_ORIENTATION landscape",
            "gmt set MAP_DEFAULT_PEN black",
            "gmt set MAP_TITLE_OFFSET 1p",
            "gmt set FONT 50",
            "gmt set FONT_LABEL 50p,Helvetica,black",
            "",
            "# parameters for gmt pscoast",
            f"R='-R{self.region}'",
            "J='-JQ15'",
            "B='-B30f10';",
            "",
            f"outputps={self.file_root}Map.eps",
            "",
            "#------- Color palette",
            f"MP={self.scale:g}",
            f"gmt makecpt -C{default.CPT_FILE_NAME} -T-$MP/$MP > cp.cpt",
            "",
            "#------- Panels",
        ]
        # 浅层在前
        for i, radius in enumerate(reversed(self.radii)):
            if i == 0:
                position = "-K -Y80 > $outputps"
            elif i % per_row == 0:
                position = (f"-K -O -X-{default.PANEL_WIDTH * (per_row - 1)} "
                            f"-Y-{default.PANEL_HEIGHT} >> $outputps")
            else:
                position = f"-K -O -X{default.PANEL_WIDTH} >> $outputps"
            lines.append(f"gmt grdimage {_shell_radius(radius)}\\smooth.grd "
                         f"-BwESn+t\"{self._title(i, radius)}\" -Ccp.cpt $R $J $B {position}")
            lines.append("gmt pscoast -Wthinner,black -A500 -J -R -K -O >> $outputps")
        last_col = (len(self.radii) - 1) % per_row
        lines += [
            "",
            "#------- Scale",
            f"gmt psscale -Ccp.cpt -Dx2/-4+w12/0.8+h -B1.0+l\"@~d@~{var}/{var} \\(\\%\\)\" "
            f"-K -O -X-{default.PANEL_WIDTH * last_col / 2:g} >> $outputps",
            "",
            "#------- Finalize",
            "gmt pstext -N -F+jLM+f30p,Helvetica,black $J $R -O << END >> $outputps",
            "END",
            "",
            "gmt psconvert $outputps -E100 -Tf -A -Qg4",
            "gmt psconvert $outputps -E100 -Tg -A -Qg4",
            "",
            "rm -rf cp.cpt gmt.conf gmt.history",
            "echo \"Done!\"",
        ]
        return lines

    def write(self, folder: PathLike) -> List[Path]:
        """
        写出 cp_master.cpt、<root>Grid.sh、<root>Map.sh

        Returns:
            写出的文件路径
        """
        folder = Path(folder)
        outputs = {
            folder / default.CPT_FILE_NAME: cpt_lines(),
            folder / f"{self.file_root}Grid.sh": self.grid_lines(),
            folder / f"{self.file_root}Map.sh": self.map_lines(),
        }
        for path, lines in outputs.items():
            path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        logger.debug("写出 %s 的 GMT 脚本到 %s", self.variable, folder)
        return list(outputs)


# ========================================
# 批处理总脚本
# ========================================
def write_parent_shellscript(variable: VariableType, methods: Sequence[InverseMethod],
                             max_num: int, folder: PathLike) -> Path:
    '''
    写出 <var>PercentAllMap.sh：遍历 METHOD1..METHOD<max_num> 子目录，
    链接并运行 Grid/Map 脚本，随后清理中间文件
    '''
    root = f"{VariableType.of(variable).value.lower()}Percent"
    lines = ["#!/bin/sh"]
    for method in methods:
        name = InverseMethod.of(method).value
        lines += [
            f"for i in `seq 1 {max_num}`",
            "do",
            f"    cd {name}$i",
            f"    ln -s ../{root}Grid.sh .",
            f"    ln -s ../{root}Map.sh .",
            f"    ln -s ../{default.CPT_FILE_NAME} .",
            f"    sh {root}Grid.sh",
            "    wait",
            f"    sh {root}Map.sh",
            "    wait",
            "    rm -rf *.grd gmt.* cp.cpt",
            f"    unlink {root}Grid.sh",
            f"    unlink {root}Map.sh",
            f"    unlink {default.CPT_FILE_NAME}",
            "    cd ..",
            "done",
        ]
    path = Path(folder) / f"{root}AllMap.sh"
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path
