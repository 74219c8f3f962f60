"""图片滤镜与混合模式.

滤镜按 CSS filter 的定义实现：亮度、对比度、饱和度、色相旋转、褐色调
都是线性颜色矩阵，通过 ``Image.convert("RGB", matrix)`` 一次完成并截断到
0-255；模糊使用高斯模糊。每个滤镜依次作用，顺序即列表顺序。

混合模式（滤色、正片叠底、叠加）用于把图层合成到不透明底图上。
"""

from __future__ import annotations

import math
from typing import Iterable

from PIL import Image, ImageChops, ImageFilter

from thumbnail_studio.models.layers import BlendMode, FilterName, FilterOp
from thumbnail_studio.utils.color_utils import to_alpha_byte
from thumbnail_studio.utils.logger import setup_logger

logger = setup_logger(__name__)

# 3×3 颜色矩阵 + 偏移，按 Pillow 的 12 元组顺序排列
ColorMatrix = tuple[float, float, float, float, float, float, float, float, float, float, float, float]


# ===================
# 颜色矩阵
# ===================


def _matrix(rows: tuple[tuple[float, float, float], ...], offset: float = 0.0) -> ColorMatrix:
    (a, b, c), (d, e, f), (g, h, i) = rows
    return (a, b, c, offset, d, e, f, offset, g, h, i, offset)  # type: ignore[return-value]


def brightness_matrix(percent: float) -> ColorMatrix:
    k = percent / 100
    return _matrix(((k, 0, 0), (0, k, 0), (0, 0, k)))


def contrast_matrix(percent: float) -> ColorMatrix:
    k = percent / 100
    return _matrix(((k, 0, 0), (0, k, 0), (0, 0, k)), offset=127.5 * (1 - k))


def saturate_matrix(percent: float) -> ColorMatrix:
    s = percent / 100
    return _matrix((
        (0.213 + 0.787 * s, 0.715 - 0.715 * s, 0.072 - 0.072 * s),
        (0.213 - 0.213 * s, 0.715 + 0.285 * s, 0.072 - 0.072 * s),
        (0.213 - 0.213 * s, 0.715 - 0.715 * s, 0.072 + 0.928 * s),
    ))


def hue_rotate_matrix(degrees: float) -> ColorMatrix:
    rad = math.radians(degrees)
    cos, sin = math.cos(rad), math.sin(rad)
    return _matrix((
        (0.213 + cos * 0.787 - sin * 0.213, 0.715 - cos * 0.715 - sin * 0.715, 0.072 - cos * 0.072 + sin * 0.928),
        (0.213 - cos * 0.213 + sin * 0.143, 0.715 + cos * 0.285 + sin * 0.140, 0.072 - cos * 0.072 - sin * 0.283),
        (0.213 - cos * 0.213 - sin * 0.787, 0.715 - cos * 0.715 + sin * 0.715, 0.072 + cos * 0.928 + sin * 0.072),
    ))


def sepia_matrix(percent: float) -> ColorMatrix:
    # 褐色调强度超过 100% 按 100% 处理
    p = 1 - min(1.0, max(0.0, percent / 100))
    return _matrix((
        (0.393 + 0.607 * p, 0.769 - 0.769 * p, 0.189 - 0.189 * p),
        (0.349 - 0.349 * p, 0.686 + 0.314 * p, 0.168 - 0.168 * p),
        (0.272 - 0.272 * p, 0.534 - 0.534 * p, 0.131 + 0.869 * p),
    ))


_MATRIX_BUILDERS = {
    FilterName.BRIGHTNESS: brightness_matrix,
    FilterName.CONTRAST: contrast_matrix,
    FilterName.SATURATE: saturate_matrix,
    FilterName.HUE_ROTATE: hue_rotate_matrix,
    FilterName.SEPIA: sepia_matrix,
}

# 不改变图像的取值
_IDENTITY_VALUES = {
    FilterName.BRIGHTNESS: 100,
    FilterName.CONTRAST: 100,
    FilterName.SATURATE: 100,
    FilterName.HUE_ROTATE: 0,
    FilterName.SEPIA: 0,
    FilterName.BLUR: 0,
}


def apply_color_matrix(image: Image.Image, matrix: ColorMatrix) -> Image.Image:
    """对 RGBA 图片的颜色通道应用矩阵，保留 alpha."""
    alpha = image.getchannel("A")
    rgb = image.convert("RGB").convert("RGB", matrix)
    rgb.putalpha(alpha)
    return rgb


def apply_filter(image: Image.Image, op: FilterOp, unit: float = 1.0) -> Image.Image:
    """应用单个滤镜.

    Args:
        image: RGBA 图片
        op: 滤镜操作
        unit: 像素缩放系数（仅影响模糊半径）

    Returns:
        新的 RGBA 图片
    """
    if op.value == _IDENTITY_VALUES[op.name]:
        return image

    if op.name == FilterName.BLUR:
        radius = max(0.0, op.value) * unit
        if radius == 0:
            return image
        return image.filter(ImageFilter.GaussianBlur(radius))

    return apply_color_matrix(image, _MATRIX_BUILDERS[op.name](op.value))


def apply_filters(image: Image.Image, ops: Iterable[FilterOp], unit: float = 1.0) -> Image.Image:
    """按顺序应用滤镜链."""
    for op in ops:
        image = apply_filter(image, op, unit)
    return image


# ===================
# 混合模式
# ===================


def _blend_rgb(backdrop: Image.Image, source: Image.Image, mode: BlendMode) -> Image.Image:
    if mode == BlendMode.SCREEN:
        return ImageChops.screen(backdrop, source)
    if mode == BlendMode.MULTIPLY:
        return ImageChops.multiply(backdrop, source)
    if mode == BlendMode.OVERLAY:
        return ImageChops.overlay(backdrop, source)
    return source


def scale_alpha(image: Image.Image, opacity: float) -> Image.Image:
    """按比例缩放 alpha 通道."""
    if opacity >= 1:
        return image
    factor = max(0.0, opacity)
    alpha = image.getchannel("A").point(lambda a: round(a * factor))
    result = image.copy()
    result.putalpha(alpha)
    return result


def blend_onto(
    backdrop: Image.Image,
    source: Image.Image,
    mode: BlendMode = BlendMode.NORMAL,
    opacity: float = 1.0,
) -> Image.Image:
    """将图层混合到底图上.

    混合结果为 ``(1 - αs)·Cb + αs·B(Cb, Cs)``，其中 αs 为源 alpha 乘以
    图层不透明度。底图必须为不透明 RGBA。

    Args:
        backdrop: 底图
        source: 图层内容（与底图同尺寸）
        mode: 混合模式
        opacity: 图层不透明度（0-1）

    Returns:
        合成后的新图片
    """
    if opacity <= 0:
        return backdrop

    if mode == BlendMode.NORMAL:
        blended = source
    else:
        blended = _blend_rgb(backdrop.convert("RGB"), source.convert("RGB"), mode).convert("RGBA")
        blended.putalpha(source.getchannel("A"))

    return Image.alpha_composite(backdrop, scale_alpha(blended, opacity))


def solid_fill(size: tuple[int, int], color: tuple[int, int, int, int], opacity: float = 1.0) -> Image.Image:
    """纯色图层."""
    r, g, b, a = color
    return Image.new("RGBA", size, (r, g, b, to_alpha_byte(a / 255 * opacity)))
