"""标题自适应字号."""

from __future__ import annotations

from thumbnail_studio.utils.constants import MIN_TITLE_FONT_SIZE

# (长度上限, 倍数)，长度小于上限时使用对应倍数
_LENGTH_STEPS: tuple[tuple[int, float], ...] = (
    (8, 1.0),
    (15, 0.8),
    (25, 0.6),
)
_LONG_TEXT_MULTIPLIER = 0.4


def length_multiplier(length: int) -> float:
    """按字符数返回字号倍数（阶梯函数）."""
    for limit, multiplier in _LENGTH_STEPS:
        if length < limit:
            return multiplier
    return _LONG_TEXT_MULTIPLIER


def resolve_font_size(title: str, base_size: float) -> float:
    """计算标题显示字号.

    只依据字符数，不测量实际字形宽度；对特别宽的字符或字体，
    该近似不保证完全避免溢出。

    Args:
        title: 标题文字
        base_size: 基础字号

    Returns:
        ``max(40, base_size × multiplier(len(title)))``

    Example:
        >>> resolve_font_size("Hi", 120)
        120.0
        >>> resolve_font_size("x" * 30, 120)
        48.0
    """
    return max(float(MIN_TITLE_FONT_SIZE), base_size * length_multiplier(len(title)))
