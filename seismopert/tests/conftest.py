# seismopert/tests/conftest.py
import numpy as np
import pytest

from seismopert.core.structure import PolynomialStructure
from seismopert.core.types import KnownParameter, ParameterType, Position, UnknownParameter, VariableType
from seismopert.io.parameter_file import write_known_parameters
from seismopert.io.structure_file import write_structure_file


def _constant_rows(values):
    rows = np.zeros((len(values), 4))
    rows[:, 0] = values
    return rows


def make_isotropic(rmin, rmax, vs, name):
    """各 zone 内为常数的各向同性结构，vp = 2 vs，rho = 3"""
    n = len(rmin)
    vs = np.asarray(vs, dtype=float)
    return PolynomialStructure.isotropic(
        rmin, rmax, _constant_rows([3.0] * n), _constant_rows(2 * vs), _constant_rows(vs),
        [600.0] * n, [57823.0] * n, name=name)


def voxel(variable, lat, lon, r, size=1.0):
    return UnknownParameter(ParameterType.VOXEL, VariableType.of(variable), Position(lat, lon, r), size)


@pytest.fixture
def constant_structure():
    """全地球 Vs = 4.0 的常数结构"""
    return make_isotropic([0.0], [6371.0], [4.0], "CONST")


@pytest.fixture
def layered_structure():
    """3480 km 处 Vs=7.2，5701 km 处 6.0，6371 km 处 4.5"""
    return make_isotropic([0.0, 3480.0, 5701.0, 6000.0], [3480.0, 5701.0, 6000.0, 6371.0],
                          [1.0, 7.2, 6.0, 4.5], "LAYERED")


@pytest.fixture
def scenario_knowns():
    return [
        KnownParameter(voxel("Vs", 10.0, 30.0, 3480.0), 0.02),
        KnownParameter(voxel("Vs", 15.0, 35.0, 5701.0), -0.01),
        KnownParameter(voxel("Vs", 20.0, 40.0, 6371.0), 0.03),
    ]


@pytest.fixture
def model_file(tmp_path, scenario_knowns):
    path = tmp_path / "model.lst"
    write_known_parameters(scenario_knowns, path)
    return path


@pytest.fixture
def layered_structure_file(tmp_path, layered_structure):
    path = tmp_path / "layered.poly"
    write_structure_file(layered_structure, path)
    return path


@pytest.fixture
def make_voxel():
    """返回构造 VOXEL 未知参数的函数"""
    return voxel
