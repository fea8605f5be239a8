import pytest

from seismopert.core.types import (
    InverseMethod,
    KnownParameter,
    ParameterType,
    Position,
    UnknownParameter,
    VariableType,
)


class TestPosition:
    """测试位置的舍入、归一化与格式"""

    def test_rounding_defines_equality(self):
        """舍入后相同的位置应相等且哈希一致"""
        a = Position(10.00001, 20.00002, 6000.0000001)
        b = Position(10.0, 20.0, 6000.0)
        assert a == b
        assert len({a, b}) == 1

    def test_longitude_normalized(self):
        """经度归一化到 (-180, 180]"""
        assert Position(0.0, 350.0, 6371.0).longitude == pytest.approx(-10.0)
        assert Position(0.0, -190.0, 6371.0).longitude == pytest.approx(170.0)
        assert Position(0.0, 180.0, 6371.0).longitude == pytest.approx(180.0)

    def test_to_line_format(self):
        """固定宽度格式"""
        assert Position(10.0, -20.5, 6371.0).to_line() == " 10.0000  -20.5000 6371.000000"

    def test_cross_date_line_format(self):
        """跨日期变更线时经度写为 [0, 360)"""
        line = Position(0.0, -10.0, 6371.0).to_line(cross_date_line=True)
        assert line.split()[1] == "350.0000"

    def test_invalid_latitude(self):
        with pytest.raises(ValueError):
            Position(91.0, 0.0, 6371.0)

    def test_negative_radius(self):
        with pytest.raises(ValueError):
            Position(0.0, 0.0, -1.0)


class TestEnums:
    """测试枚举解析"""

    def test_variable_type_case_insensitive(self):
        assert VariableType.of("vs") is VariableType.Vs
        assert VariableType.of("VPV") is VariableType.Vpv
        assert VariableType.of(VariableType.RHO) is VariableType.RHO

    def test_variable_type_unknown(self):
        with pytest.raises(ValueError, match="未知物理量"):
            VariableType.of("Foo")

    def test_inverse_method(self):
        assert InverseMethod.of("cg") is InverseMethod.CG
        with pytest.raises(ValueError):
            InverseMethod.of("GA")


class TestParameters:
    """测试未知/已知参数"""

    def test_known_parameter_delegates(self, make_voxel):
        known = KnownParameter(make_voxel("Vs", 1.0, 2.0, 6000.0), 0.5)
        assert known.position == Position(1.0, 2.0, 6000.0)
        assert known.variable_type is VariableType.Vs

    def test_string_form(self, make_voxel):
        known = KnownParameter(make_voxel("Vs", 1.0, 2.0, 6000.0, size=2.5), 0.5)
        assert str(known).split() == ["VOXEL", "Vs", "1.0000", "2.0000", "6000.000000", "2.5", "0.5"]

    def test_layer_string_form(self):
        layer = UnknownParameter(ParameterType.LAYER, VariableType.MU, Position(0, 0, 5000.0), 50.0)
        assert str(layer) == "LAYER MU 5000.0 50.0"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
