"""颜色工具函数模块.

样式配置中的颜色以十六进制字符串保存，渲染时统一转换为 RGBA 元组。
"""

from __future__ import annotations

from functools import lru_cache

from PIL import ImageColor

from thumbnail_studio.utils.logger import setup_logger

logger = setup_logger(__name__)

RGBColor = tuple[int, int, int]
RGBAColor = tuple[int, int, int, int]

# 无法解析时的回退颜色
FALLBACK_COLOR: RGBAColor = (0, 0, 0, 255)


@lru_cache(maxsize=256)
def parse_color(value: str) -> RGBAColor:
    """解析颜色字符串.

    支持 #rgb、#rrggbb、#rrggbbaa 及 CSS 颜色名。无法识别的颜色
    与浏览器忽略无效声明的行为一致：记录警告并回退为不透明黑色。

    Args:
        value: 颜色字符串

    Returns:
        (r, g, b, a) 元组
    """
    try:
        rgb = ImageColor.getrgb(value.strip())
    except (ValueError, AttributeError):
        logger.warning(f"无法解析颜色 '{value}'，使用回退颜色")
        return FALLBACK_COLOR

    if len(rgb) == 3:
        return (*rgb, 255)
    return rgb  # type: ignore[return-value]


def with_alpha(value: str, alpha: float) -> RGBAColor:
    """按比例设置颜色的不透明度.

    Args:
        value: 颜色字符串
        alpha: 不透明度倍数（0-1，越界时截断）

    Returns:
        RGBA 元组
    """
    r, g, b, a = parse_color(value)
    return (r, g, b, to_alpha_byte(a / 255 * alpha))


def to_alpha_byte(alpha: float) -> int:
    """将 0-1 的不透明度转为 0-255 字节值."""
    return max(0, min(255, round(alpha * 255)))
