import numpy as np
import pytest
import yaml

from seismopert.config.builder import MapperConfigBuilder
from seismopert.core.errors import ConfigurationError, OutOfRangeError
from seismopert.core.multigrid import MultigridDesign
from seismopert.core.types import KnownParameter
from seismopert.io.multigrid_file import write_multigrid_design
from seismopert.io.parameter_file import write_known_parameters
from seismopert.io.perturbation_list import read_perturbation_map
from seismopert.workflow import ModelMapper


def _builder(tmp_path, model_file, structure_file):
    return (MapperConfigBuilder()
            .set_work_path(tmp_path)
            .set_model_path(model_file.name)
            .set_structure_path(structure_file.name)
            .set_tag("test"))


class TestModelMapper:
    """测试单模型出图流程"""

    def test_end_to_end(self, tmp_path, model_file, layered_structure_file, scenario_knowns):
        out = ModelMapper(_builder(tmp_path, model_file, layered_structure_file).build()).run()

        assert out.parent == tmp_path
        assert out.name.startswith("modelMap_test_")
        percents = read_perturbation_map(out / "vsPercent.lst")
        assert list(percents) == [k.position for k in scenario_knowns]
        assert np.round(list(percents.values()), 3).tolist() == [0.278, -0.167, 0.667]

        grid = (out / "vsPercentGrid.sh").read_text()
        assert "for depth in 3480.0 5701.0 6371.0" in grid
        assert "-R25/45/5/25" in grid
        assert (out / "vsPercentMap.sh").is_file()
        assert (out / "cp_master.cpt").is_file()

        dumped = yaml.safe_load((out / "_ModelMapper.yml").read_text(encoding="utf-8"))
        assert dumped["variableTypes"] == ["Vs"]
        assert dumped["tag"] == "test"

    def test_explicit_region(self, tmp_path, model_file, layered_structure_file):
        cfg = _builder(tmp_path, model_file, layered_structure_file).set_map_region("0/60/0/30").build()
        out = ModelMapper(cfg).run()
        assert "-R0/60/0/30" in (out / "vsPercentGrid.sh").read_text()

    def test_reference_structure(self, tmp_path, model_file, layered_structure_file):
        """换算到另一结构后物理总值不变"""
        cfg = (_builder(tmp_path, model_file, layered_structure_file)
               .set_reference_structure_name("PREM").build())
        out = ModelMapper(cfg).run()
        percents = list(read_perturbation_map(out / "vsPercent.lst").values())
        assert not np.allclose(np.round(percents, 3), [0.278, -0.167, 0.667])
        assert len(percents) == 3

    def test_missing_model(self, tmp_path, layered_structure_file):
        cfg = (MapperConfigBuilder().set_work_path(tmp_path)
               .set_model_path("none.lst").set_structure_path(layered_structure_file).build())
        with pytest.raises(ConfigurationError, match="modelPath"):
            ModelMapper(cfg).run()
        assert not any(p.name.startswith("modelMap") for p in tmp_path.iterdir())

    def test_unknown_structure_name(self, tmp_path, model_file):
        cfg = (MapperConfigBuilder().set_work_path(tmp_path)
               .set_model_path(model_file).set_structure_name("MARS").build())
        with pytest.raises(ConfigurationError):
            ModelMapper(cfg).run()

    def test_missing_multigrid_is_ignored(self, tmp_path, model_file, layered_structure_file, caplog):
        cfg = (_builder(tmp_path, model_file, layered_structure_file)
               .set_multigrid_path("missing.inf").build())
        out = ModelMapper(cfg).run()
        assert len(read_perturbation_map(out / "vsPercent.lst")) == 3
        assert "不做逆融合" in caplog.text

    def test_multigrid(self, tmp_path, layered_structure_file, make_voxel):
        """粗网格的值写到每个细网格位置，半径取逆融合后的位置"""
        fine = [make_voxel("Vs", 10.0, 30.0, 6371.0), make_voxel("Vs", 10.0, 40.0, 6371.0)]
        design = MultigridDesign()
        fused = design.add_fusion(*fine)
        write_multigrid_design(design, tmp_path / "multigrid.inf")
        write_known_parameters([KnownParameter(fused, 0.045),
                                KnownParameter(make_voxel("Vs", 0.0, 0.0, 5701.0), 0.06)],
                               tmp_path / "model.lst")

        cfg = (MapperConfigBuilder().set_work_path(tmp_path).set_model_path("model.lst")
               .set_structure_path(layered_structure_file).set_multigrid_path("multigrid.inf").build())
        out = ModelMapper(cfg).run()

        percents = read_perturbation_map(out / "vsPercent.lst")
        assert list(percents) == [fine[0].position, fine[1].position, make_voxel("Vs", 0, 0, 5701.0).position]
        assert np.allclose(list(percents.values()), [1.0, 1.0, 1.0])
        assert "for depth in 5701.0 6371.0" in (out / "vsPercentGrid.sh").read_text()

    def test_date_line_model(self, tmp_path, layered_structure_file, make_voxel):
        """跨日期变更线时经度以 [0, 360) 写出，区域也使用 0-360"""
        write_known_parameters([KnownParameter(make_voxel("Vs", 0.0, 170.0, 6371.0), 0.045),
                                KnownParameter(make_voxel("Vs", 0.0, -170.0, 6371.0), -0.045)],
                               tmp_path / "model.lst")
        cfg = (MapperConfigBuilder().set_work_path(tmp_path).set_model_path("model.lst")
               .set_structure_path(layered_structure_file).build())
        out = ModelMapper(cfg).run()

        lines = (out / "vsPercent.lst").read_text().splitlines()
        assert [line.split()[1] for line in lines] == ["170.0000", "190.0000"]
        assert "-R165/195/-5/5" in (out / "vsPercentGrid.sh").read_text()

    def test_grid_interval_follows_voxel_spacing(self, tmp_path, layered_structure_file, make_voxel):
        write_known_parameters([KnownParameter(make_voxel("Vs", lat, 0.0, 6371.0), 0.01)
                                for lat in (0.0, 2.0, 4.0)], tmp_path / "model.lst")
        cfg = (MapperConfigBuilder().set_work_path(tmp_path).set_model_path("model.lst")
               .set_structure_path(layered_structure_file).build())
        grid = (ModelMapper(cfg).run() / "vsPercentGrid.sh").read_text()
        assert "-I2 -di0" in grid
        assert "-I0.2" in grid

    def test_display_layers(self, tmp_path, model_file, layered_structure_file):
        """displayLayers 只限制出图的切片，列表文件仍含全部扰动"""
        cfg = (_builder(tmp_path, model_file, layered_structure_file)
               .set_display_layers([6371.0, 5701.0]).build())
        out = ModelMapper(cfg).run()
        assert "for depth in 5701.0 6371.0\n" in (out / "vsPercentGrid.sh").read_text()
        assert len(read_perturbation_map(out / "vsPercent.lst")) == 3

    def test_display_layer_not_in_model(self, tmp_path, model_file, layered_structure_file):
        cfg = (_builder(tmp_path, model_file, layered_structure_file)
               .set_display_layers([6000.0]).build())
        with pytest.raises(ConfigurationError, match="displayLayers"):
            ModelMapper(cfg).run()

    def test_out_of_range_model(self, tmp_path, layered_structure_file, make_voxel):
        write_known_parameters([KnownParameter(make_voxel("Vs", 0, 0, 6400.0), 0.1)], tmp_path / "model.lst")
        cfg = (MapperConfigBuilder().set_work_path(tmp_path).set_model_path("model.lst")
               .set_structure_path(layered_structure_file).build())
        with pytest.raises(OutOfRangeError):
            ModelMapper(cfg).run()


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
