import logging

import pytest
import yaml

from seismopert.cli import main
from seismopert.config.builder import load_config


@pytest.fixture(autouse=True)
def reset_package_logger():
    """main() 会安装 handler，测试结束后移除"""
    yield
    logger = logging.getLogger("seismopert")
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)


class TestCli:
    """测试命令行入口"""

    def test_template(self, tmp_path):
        out = tmp_path / "map.yml"
        assert main(["template", "map", "-o", str(out)]) == 0
        data = yaml.safe_load(out.read_text(encoding="utf-8"))
        assert data["modelPath"] == "model.lst"
        assert load_config(out).model_path.name == "model.lst"

    def test_template_existing(self, tmp_path):
        out = tmp_path / "map.yml"
        out.write_text("x: 1\n")
        assert main(["template", "map", "-o", str(out)]) == 1

    def test_map(self, tmp_path, model_file, layered_structure_file):
        config = tmp_path / "config.yml"
        config.write_text(yaml.safe_dump({
            "workPath": str(tmp_path),
            "modelPath": model_file.name,
            "structurePath": layered_structure_file.name,
        }))
        assert main(["--log-level", "WARNING", "map", str(config)]) == 0
        outputs = [p for p in tmp_path.iterdir() if p.name.startswith("modelMap")]
        assert len(outputs) == 1
        assert (outputs[0] / "vsPercent.lst").is_file()

    def test_map_configuration_error(self, tmp_path):
        config = tmp_path / "config.yml"
        config.write_text(yaml.safe_dump({"workPath": str(tmp_path), "modelPath": "none.lst"}))
        assert main(["map", str(config)]) == 1

    def test_map_malformed_model(self, tmp_path, layered_structure_file, caplog):
        """模型文件行格式错误时返回 1 并记录错误，不抛出异常"""
        (tmp_path / "model.lst").write_text("VOXEL Vs 10 20 0.1\n")
        config = tmp_path / "config.yml"
        config.write_text(yaml.safe_dump({
            "workPath": str(tmp_path),
            "modelPath": "model.lst",
            "structurePath": layered_structure_file.name,
        }))
        assert main(["map", str(config)]) == 1
        assert "行格式错误" in caplog.text
        assert not any(p.name.startswith("modelMap") for p in tmp_path.iterdir())


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
