"""渐变蒙版生成.

由 256×256 的线性/径向距离源图，经缩放、旋转和查找表映射
得到任意尺寸、角度和色标的灰度蒙版。蒙版值 0-255 对应渐变位置 0-1。
"""

from __future__ import annotations

import math
from functools import lru_cache
from typing import Callable

from PIL import Image

from thumbnail_studio.utils.color_utils import RGBAColor

Size = tuple[int, int]

# 径向距离源图边长
_DISC_SIZE = 256


@lru_cache(maxsize=1)
def _distance_disc() -> Image.Image:
    """距离源图：像素值与到中心的距离成正比，内切圆边缘为 255，之外截断."""
    half = _DISC_SIZE / 2
    data = [
        min(255, round(math.hypot(x + 0.5 - half, y + 0.5 - half) / half * 255))
        for y in range(_DISC_SIZE)
        for x in range(_DISC_SIZE)
    ]
    disc = Image.new("L", (_DISC_SIZE, _DISC_SIZE))
    disc.putdata(data)
    return disc


def linear_gradient_mask(size: Size, angle: float) -> Image.Image:
    """按 CSS linear-gradient 角度生成位置蒙版.

    角度 0 指向上方、90 指向右方，顺时针递增。渐变线长度为
    ``|w·sin θ| + |h·cos θ|``，保证两端正好经过画布角点。

    Args:
        size: 画布尺寸
        angle: 渐变角度（度）

    Returns:
        "L" 模式蒙版，起点 0、终点 255
    """
    width, height = size
    rad = math.radians(angle)
    length = abs(width * math.sin(rad)) + abs(height * math.cos(rad))
    side = math.ceil(math.hypot(width, height)) + 2

    # 竖直方向 0→255 的正方形，渐变段居中，两侧保持端点值
    square = Image.new("L", (side, side), 0)
    ramp_height = max(1, round(length))
    ramp = Image.linear_gradient("L").resize((side, ramp_height), Image.Resampling.BILINEAR)
    top = (side - ramp_height) // 2
    square.paste(255, (0, top + ramp_height, side, side))
    square.paste(ramp, (0, top))

    # Pillow 逆时针旋转；竖直向下对应 CSS 180°
    rotated = square.rotate(180 - angle, resample=Image.Resampling.BILINEAR)
    left = (side - width) // 2
    upper = (side - height) // 2
    return rotated.crop((left, upper, left + width, upper + height))


def radial_gradient_mask(
    size: Size,
    center: tuple[float, float],
    radius: float,
    extent: float,
) -> Image.Image:
    """生成径向位置蒙版.

    蒙版值 v 对应的半径比例为 ``v / 255 × extent``，超出 extent 的区域取 255。

    Args:
        size: 画布尺寸
        center: 圆心（像素，可在画布外）
        radius: 100% 对应的半径（像素）
        extent: 蒙版覆盖的最大半径比例

    Returns:
        "L" 模式蒙版
    """
    outer = max(1, round(radius * extent))
    disc = _distance_disc().resize((outer * 2, outer * 2), Image.Resampling.BILINEAR)
    mask = Image.new("L", size, 255)
    mask.paste(disc, (round(center[0]) - outer, round(center[1]) - outer))
    return mask


def remap(mask: Image.Image, curve: Callable[[float], float]) -> Image.Image:
    """用 0-1 → 0-1 的曲线函数映射蒙版值."""
    lut = [max(0, min(255, round(curve(v / 255) * 255))) for v in range(256)]
    return mask.point(lut)


def colorize(mask: Image.Image, color: RGBAColor) -> Image.Image:
    """以蒙版为 alpha 生成纯色图层（颜色自身 alpha 叠乘）."""
    r, g, b, a = color
    alpha = mask if a == 255 else mask.point(lambda v: round(v * a / 255))
    layer = Image.new("RGBA", mask.size, (r, g, b, 255))
    layer.putalpha(alpha)
    return layer


def two_color_gradient(mask: Image.Image, start: RGBAColor, end: RGBAColor) -> Image.Image:
    """按蒙版在两种颜色间线性插值."""
    first = Image.new("RGBA", mask.size, start)
    second = Image.new("RGBA", mask.size, end)
    return Image.composite(second, first, mask)
