"""背景变换几何单元测试."""

from __future__ import annotations

import pytest

from thumbnail_studio.core.geometry import (
    IDENTITY,
    apply,
    compose,
    invert,
    multiply,
    pillow_coefficients,
)
from thumbnail_studio.models.layers import RotateOp, ScaleOp, TranslateOp


def _approx(point):
    return pytest.approx(point, abs=1e-9)


class TestCompose:
    """变换组合测试."""

    def test_empty_is_identity(self):
        """测试空变换."""
        assert compose((), (50, 50)) == _approx(IDENTITY)

    def test_scale_around_center(self):
        """测试绕中心缩放."""
        m = compose([ScaleOp(factor=2)], (50, 50))
        assert apply(m, (50, 50)) == _approx((50, 50))
        assert apply(m, (60, 50)) == _approx((70, 50))

    def test_rotate_clockwise(self):
        """测试正角度为顺时针（y 轴向下）."""
        m = compose([RotateOp(degrees=90)], (50, 50))
        assert apply(m, (60, 50)) == _approx((50, 60))

    def test_translate_scaled_by_unit(self):
        """测试平移量乘以像素缩放系数."""
        m = compose([TranslateOp(x=10, y=-5)], (0, 0), unit=2)
        assert apply(m, (0, 0)) == _approx((20, -10))

    def test_translate_after_scale_is_scaled(self):
        """测试缩放之后的平移在缩放后的坐标系中生效."""
        m = compose([ScaleOp(factor=2), TranslateOp(x=10)], (0, 0))
        assert apply(m, (0, 0)) == _approx((20, 0))

    def test_extra_translate_composes(self):
        """测试末尾追加平移等于在原矩阵右侧乘平移."""
        base = [ScaleOp(factor=1.5), RotateOp(degrees=30), TranslateOp(x=4, y=2)]
        center = (100, 50)
        with_ghost = compose([*base, TranslateOp(x=3)], center)
        expected = multiply(
            compose(base, center),
            compose([TranslateOp(x=3)], center),
        )
        assert with_ghost == _approx(expected)


class TestInvert:
    """逆矩阵测试."""

    def test_round_trip(self):
        """测试矩阵与逆矩阵相乘为单位矩阵."""
        m = compose([ScaleOp(factor=1.3), RotateOp(degrees=17)], (40, 30))
        assert multiply(m, invert(m)) == _approx(IDENTITY)

    def test_singular(self):
        """测试缩放为 0 时不可逆."""
        assert invert(compose([ScaleOp(factor=0)], (10, 10))) is None

    def test_pillow_coefficients_degenerate(self):
        """测试退化变换返回 None."""
        assert pillow_coefficients([ScaleOp(factor=0)], (100, 50)) is None

    def test_pillow_coefficients_maps_output_to_input(self):
        """测试系数把输出像素映射回输入像素."""
        coefficients = pillow_coefficients([ScaleOp(factor=2)], (100, 100))
        assert apply(coefficients, (70, 50)) == _approx((60, 50))
