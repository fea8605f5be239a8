import logging

import pytest

from seismopert.core.types import ParameterType, Position, VariableType
from seismopert.io.parameter_file import (
    read_known_parameters,
    read_unknown_parameters,
    write_known_parameters,
    write_unknown_parameters,
)
from seismopert.io.reader import read_information_lines


class TestInformationReader:
    """测试注释与空行处理"""

    def test_skips_comments(self, tmp_path):
        path = tmp_path / "info.txt"
        path.write_text("# header\n\n! note\n  value 1  \ncatalog 2\n")
        assert read_information_lines(path) == ["value 1", "catalog 2"]

    def test_structure_comments(self, tmp_path):
        """结构文件中 c 开头也是注释"""
        path = tmp_path / "info.txt"
        path.write_text("c comment\nC Comment\n1\n")
        assert read_information_lines(path, includes_alphabet=False) == ["1"]

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            read_information_lines(tmp_path / "none.txt")


class TestKnownParameterFile:
    """测试已知参数文件"""

    def test_read_voxel_and_layer(self, tmp_path):
        path = tmp_path / "model.lst"
        path.write_text(
            "# inversion result\n"
            "VOXEL Vs 10.0 20.0 6000.0 1.5 0.013\n"
            "LAYER MU 5000.0 100.0 -0.2\n"
        )
        knowns = read_known_parameters(path)
        assert len(knowns) == 2
        assert knowns[0].parameter.parameter_type is ParameterType.VOXEL
        assert knowns[0].position == Position(10.0, 20.0, 6000.0)
        assert knowns[0].parameter.size == 1.5
        assert knowns[0].value == 0.013
        assert knowns[1].parameter.parameter_type is ParameterType.LAYER
        assert knowns[1].variable_type is VariableType.MU
        assert knowns[1].position.radius == 5000.0

    def test_write_then_read(self, model_file, scenario_knowns):
        assert read_known_parameters(model_file) == scenario_knowns

    def test_malformed_line(self, tmp_path):
        path = tmp_path / "bad.lst"
        path.write_text("VOXEL Vs 10.0 20.0 0.1\n")
        with pytest.raises(ValueError, match="行格式错误"):
            read_known_parameters(path)

    def test_duplicate_warning(self, tmp_path, caplog):
        path = tmp_path / "dup.lst"
        path.write_text("VOXEL Vs 10 20 6000 1 0.1\nVOXEL Vs 10 20 6000 1 0.2\n")
        with caplog.at_level(logging.WARNING, logger="seismopert"):
            knowns = read_known_parameters(path)
        assert len(knowns) == 2
        assert "重复参数" in caplog.text


class TestUnknownParameterFile:
    def test_write_then_read(self, tmp_path, scenario_knowns):
        params = [k.parameter for k in scenario_knowns]
        path = tmp_path / "unknowns.lst"
        write_unknown_parameters(params, path)
        assert read_unknown_parameters(path) == params

    def test_unsupported_type(self, tmp_path):
        path = tmp_path / "unknowns.lst"
        path.write_text("SOURCE Vs 1 2\n")
        with pytest.raises(ValueError):
            read_unknown_parameters(path)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
