"""滤镜与混合模式单元测试."""

from __future__ import annotations

from PIL import Image

from thumbnail_studio.models.layers import BlendMode, FilterName, FilterOp
from thumbnail_studio.services.image_filters import (
    apply_filter,
    apply_filters,
    blend_onto,
    scale_alpha,
    solid_fill,
)


def _pixel(color, alpha=255):
    return Image.new("RGBA", (4, 4), (*color, alpha))


def _close(actual, expected, tolerance=2):
    return all(abs(a - e) <= tolerance for a, e in zip(actual, expected))


# ===================
# 颜色滤镜测试
# ===================


class TestColorFilters:
    """颜色滤镜测试."""

    def test_identity_values_return_same_image(self):
        """测试不改变图像的取值直接返回原图."""
        image = _pixel((10, 20, 30))
        for name, value in (
            (FilterName.BRIGHTNESS, 100),
            (FilterName.CONTRAST, 100),
            (FilterName.SATURATE, 100),
            (FilterName.HUE_ROTATE, 0),
            (FilterName.SEPIA, 0),
            (FilterName.BLUR, 0),
        ):
            assert apply_filter(image, FilterOp(name=name, value=value)) is image

    def test_brightness(self):
        """测试亮度."""
        result = apply_filter(_pixel((200, 100, 50)), FilterOp(name=FilterName.BRIGHTNESS, value=50))
        assert _close(result.getpixel((0, 0)), (100, 50, 25, 255))

    def test_brightness_clamps(self):
        """测试超出范围的结果截断到 255."""
        result = apply_filter(_pixel((200, 100, 50)), FilterOp(name=FilterName.BRIGHTNESS, value=300))
        assert result.getpixel((0, 0))[0] == 255

    def test_contrast_zero_is_gray(self):
        """测试对比度为 0 时为中灰."""
        result = apply_filter(_pixel((250, 10, 90)), FilterOp(name=FilterName.CONTRAST, value=0))
        assert _close(result.getpixel((0, 0)), (128, 128, 128, 255))

    def test_saturate_zero(self):
        """测试饱和度为 0 时为灰度."""
        result = apply_filter(_pixel((255, 0, 0)), FilterOp(name=FilterName.SATURATE, value=0))
        r, g, b, _ = result.getpixel((0, 0))
        assert _close((r, g, b), (54, 54, 54))

    def test_hue_rotate_full_turn(self):
        """测试色相旋转 360° 回到原色."""
        result = apply_filter(_pixel((200, 80, 30)), FilterOp(name=FilterName.HUE_ROTATE, value=360))
        assert _close(result.getpixel((0, 0)), (200, 80, 30, 255))

    def test_sepia_full(self):
        """测试 100% 褐色调."""
        result = apply_filter(_pixel((255, 255, 255)), FilterOp(name=FilterName.SEPIA, value=100))
        assert _close(result.getpixel((0, 0)), (255, 255, 239, 255))

    def test_alpha_preserved(self):
        """测试滤镜保留透明度."""
        result = apply_filter(_pixel((200, 100, 50), 77), FilterOp(name=FilterName.BRIGHTNESS, value=50))
        assert result.getpixel((0, 0))[3] == 77

    def test_chain_order(self):
        """测试滤镜链按顺序作用."""
        image = _pixel((200, 100, 50))
        ops = [
            FilterOp(name=FilterName.BRIGHTNESS, value=50),
            FilterOp(name=FilterName.BRIGHTNESS, value=200),
        ]
        assert _close(apply_filters(image, ops).getpixel((0, 0)), (200, 100, 50, 255))

    def test_negative_blur_ignored(self):
        """测试负模糊半径不报错."""
        image = _pixel((1, 2, 3))
        assert apply_filter(image, FilterOp(name=FilterName.BLUR, value=-4)) is image


# ===================
# 混合模式测试
# ===================


class TestBlend:
    """混合模式测试."""

    def test_normal_half_opacity(self):
        """测试普通混合与不透明度."""
        result = blend_onto(_pixel((0, 0, 0)), _pixel((200, 200, 200)), BlendMode.NORMAL, 0.5)
        assert _close(result.getpixel((0, 0)), (100, 100, 100, 255))

    def test_screen(self):
        """测试滤色."""
        result = blend_onto(_pixel((128, 0, 0)), _pixel((128, 0, 0)), BlendMode.SCREEN)
        assert _close(result.getpixel((0, 0)), (192, 0, 0, 255))

    def test_multiply(self):
        """测试正片叠底."""
        result = blend_onto(_pixel((255, 128, 0)), _pixel((128, 128, 128)), BlendMode.MULTIPLY)
        assert _close(result.getpixel((0, 0)), (128, 64, 0, 255))

    def test_zero_opacity_returns_backdrop(self):
        """测试不透明度为 0."""
        backdrop = _pixel((5, 5, 5))
        assert blend_onto(backdrop, _pixel((255, 255, 255)), BlendMode.SCREEN, 0) is backdrop

    def test_negative_opacity(self):
        """测试负不透明度按 0 处理."""
        backdrop = _pixel((5, 5, 5))
        assert blend_onto(backdrop, _pixel((255, 255, 255)), opacity=-1) is backdrop

    def test_result_is_opaque(self):
        """测试合成结果保持不透明."""
        result = blend_onto(_pixel((0, 0, 0)), _pixel((255, 0, 0), 100), BlendMode.OVERLAY, 0.7)
        assert result.getpixel((0, 0))[3] == 255


class TestHelpers:
    """辅助函数测试."""

    def test_scale_alpha(self):
        """测试缩放透明度."""
        assert scale_alpha(_pixel((1, 1, 1), 200), 0.5).getpixel((0, 0))[3] == 100

    def test_solid_fill(self):
        """测试纯色图层."""
        fill = solid_fill((3, 2), (10, 20, 30, 255), 0.2)
        assert fill.size == (3, 2)
        assert fill.getpixel((0, 0)) == (10, 20, 30, 51)
