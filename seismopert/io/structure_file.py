# seismopert/io/structure_file.py
"""
多项式结构文件（DSM 格式）

第一行 nzone，之后每个 zone 6 行：
    rmin rmax rho0 rho1 rho2 rho3
    vpv0 vpv1 vpv2 vpv3
    vph0 vph1 vph2 vph3
    vsv0 vsv1 vsv2 vsv3
    vsh0 vsh1 vsh2 vsh3
    eta0 eta1 eta2 eta3 qMu qKappa
c / C / ! / # 开头的行为注释。
"""
from pathlib import Path
from typing import List

from ..core.errors import ConfigurationError
from ..core.structure import PolynomialStructure
from .reader import PathLike, read_information_lines

_LINES_PER_ZONE = 6


def _floats(line: str, n: int, path: Path) -> List[float]:
    fields = line.split()
    if len(fields) != n:
        raise ConfigurationError(f"{path} 行应有 {n} 个数值，当前 {len(fields)}: '{line}'")
    try:
        return [float(v) for v in fields]
    except ValueError as exc:
        raise ConfigurationError(f"{path} 行含非数值: '{line}'") from exc


def read_structure_file(path: PathLike) -> PolynomialStructure:
    """
    读取结构文件

    Raises:
        ConfigurationError: 行数与 nzone 不符或数值格式错误
    """
    path = Path(path)
    lines = read_information_lines(path, includes_alphabet=False)
    if not lines:
        raise ConfigurationError(f"{path} 为空")
    try:
        n_zone = int(lines[0].split()[0])
    except ValueError as exc:
        raise ConfigurationError(f"{path} 第一行应为 zone 数: '{lines[0]}'") from exc
    if len(lines) != n_zone * _LINES_PER_ZONE + 1:
        raise ConfigurationError(
            f"{path} 有效行数应为 {n_zone * _LINES_PER_ZONE + 1}，当前 {len(lines)}")

    rmin, rmax, qmu, qkappa = [], [], [], []
    coeffs = {name: [] for name in ("rho", "vpv", "vph", "vsv", "vsh", "eta")}
    for i in range(n_zone):
        block = lines[1 + i * _LINES_PER_ZONE: 1 + (i + 1) * _LINES_PER_ZONE]
        first = _floats(block[0], 6, path)
        rmin.append(first[0])
        rmax.append(first[1])
        coeffs["rho"].append(first[2:])
        for name, line in zip(("vpv", "vph", "vsv", "vsh"), block[1:5]):
            coeffs[name].append(_floats(line, 4, path))
        last = _floats(block[5], 6, path)
        coeffs["eta"].append(last[:4])
        qmu.append(last[4])
        qkappa.append(last[5])

    try:
        return PolynomialStructure(rmin, rmax, qmu=qmu, qkappa=qkappa, name=path.stem, **coeffs)
    except ValueError as exc:
        raise ConfigurationError(f"{path} 结构定义不合法: {exc}") from exc


def structure_lines(structure: PolynomialStructure) -> List[str]:
    """结构的文本表示"""
    def fmt(values) -> str:
        return " ".join(repr(float(v)) for v in values)

    lines = [f"{structure.n_zone} nzone",
             "c  rmin rmax rho(4)",
             "c  vpv(4) / vph(4) / vsv(4) / vsh(4)",
             "c  eta(4) qMu qKappa"]
    for i in range(structure.n_zone):
        lines.append(fmt([structure.rmin[i], structure.rmax[i], *structure.rho[i]]))
        for name in ("vpv", "vph", "vsv", "vsh"):
            lines.append(fmt(getattr(structure, name)[i]))
        lines.append(fmt([*structure.eta[i], structure.qmu[i], structure.qkappa[i]]))
    return lines


def write_structure_file(structure: PolynomialStructure, path: PathLike) -> None:
    with open(path, "w", encoding="utf-8") as f:
        f.write("\n".join(structure_lines(structure)) + "\n")
