import logging

import numpy as np
import pytest

from seismopert.config.builder import MapperConfigBuilder
from seismopert.core.errors import ConfigurationError
from seismopert.core.types import KnownParameter
from seismopert.io.parameter_file import write_known_parameters, write_unknown_parameters
from seismopert.io.perturbation_list import read_perturbation_map
from seismopert.workflow import ModelSetMapper

MAX_NUM = 3


@pytest.fixture
def result_path(tmp_path, scenario_knowns):
    """只有 CG 的结果：CG/CG1.lst ... CG/CG3.lst，值随 k 线性增大"""
    root = tmp_path / "result"
    (root / "CG").mkdir(parents=True)
    for k in range(1, MAX_NUM + 1):
        knowns = [KnownParameter(known.parameter, known.value * k) for known in scenario_knowns]
        write_known_parameters(knowns, root / "CG" / f"CG{k}.lst")
    return root


def _config(tmp_path, structure_file):
    return (MapperConfigBuilder()
            .set_work_path(tmp_path)
            .set_result_path("result")
            .set_structure_path(structure_file)
            .set_inverse_methods(["CG", "SVD"])
            .set_max_num(MAX_NUM))


class TestModelSetMapper:
    """测试批处理出图"""

    def test_skips_missing_method(self, tmp_path, result_path, layered_structure_file, caplog):
        with caplog.at_level(logging.WARNING, logger="seismopert"):
            out = ModelSetMapper(_config(tmp_path, layered_structure_file).build()).run()

        assert out.name.startswith("modelMaps")
        subfolders = sorted(p.name for p in out.iterdir() if p.is_dir())
        assert subfolders == ["CG1", "CG2", "CG3"]
        assert "Results for SVD do not exist, skipping." in caplog.text
        assert "CG do not exist" not in caplog.text

        percents = read_perturbation_map(out / "CG2" / "vsPercent.lst")
        assert np.round(list(percents.values()), 3).tolist() == [0.556, -0.333, 1.333]

        parent = (out / "vsPercentAllMap.sh").read_text()
        assert "cd CG$i" in parent
        assert "SVD" not in parent
        assert "for depth in 3480.0 5701.0 6371.0" in (out / "vsPercentGrid.sh").read_text()
        assert (out / "_ModelSetMapper.yml").is_file()

    def test_unknowns_define_region(self, tmp_path, result_path, layered_structure_file, scenario_knowns,
                                    make_voxel):
        """unknowns.lst 存在时由其确定半径与区域"""
        params = [k.parameter for k in scenario_knowns] + [make_voxel("Vs", -40.0, 100.0, 6000.0)]
        write_unknown_parameters(params, result_path / "unknowns.lst")
        out = ModelSetMapper(_config(tmp_path, layered_structure_file).build()).run()
        grid = (out / "vsPercentGrid.sh").read_text()
        assert "for depth in 3480.0 5701.0 6000.0 6371.0" in grid
        assert "-R25/105/-45/25" in grid

    def test_display_layers(self, tmp_path, result_path, layered_structure_file):
        cfg = _config(tmp_path, layered_structure_file).set_display_layers("3480").build()
        out = ModelSetMapper(cfg).run()
        assert "for depth in 3480.0\n" in (out / "vsPercentGrid.sh").read_text()
        assert len(read_perturbation_map(out / "CG1" / "vsPercent.lst")) == 3

    def test_missing_answer_file(self, tmp_path, result_path, layered_structure_file):
        (result_path / "CG" / "CG2.lst").unlink()
        with pytest.raises(ConfigurationError, match="缺少"):
            ModelSetMapper(_config(tmp_path, layered_structure_file).build()).run()
        assert not any(p.name.startswith("modelMaps") for p in tmp_path.iterdir())

    def test_no_results_at_all(self, tmp_path, layered_structure_file, caplog):
        (tmp_path / "result").mkdir()
        cfg = _config(tmp_path, layered_structure_file).build()
        assert ModelSetMapper(cfg).run() is None
        assert "Results for CG do not exist" in caplog.text

    def test_missing_result_path(self, tmp_path, layered_structure_file):
        with pytest.raises(ConfigurationError, match="resultPath"):
            ModelSetMapper(_config(tmp_path, layered_structure_file).build()).run()


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
