"""标题绘制样式计算.

三个开关（3D 挤出、发光、描边）相互独立、可以组合：

- 启用 3D：每单位深度一个实心偏移阴影 (1,1)…(depth,depth)，
  发光强度大于 0 时再追加一个柔和发光项。该列表替代普通发光列表。
- 否则若发光强度大于 0：三个同心柔和阴影，模糊半径为
  (强度×10) 的 0.5/1/2 倍，不透明度为发光色的 80%/60%/40%。
- 否则：纯色填充，无阴影。

描边在以上三种情况下都独立生效，不影响阴影列表。
"""

from __future__ import annotations

from thumbnail_studio.models.layers import ShadowTerm, StrokePaint, TextPaint
from thumbnail_studio.models.style_config import StyleConfig

# 每单位发光强度对应的模糊半径（像素）
GLOW_BLUR_PER_UNIT = 10

# 普通发光：(模糊倍数, 不透明度)
GLOW_RINGS: tuple[tuple[float, float], ...] = (
    (0.5, 0.8),
    (1.0, 0.6),
    (2.0, 0.4),
)

# 3D 模式下追加的发光项不透明度
EXTRUSION_GLOW_ALPHA = 0.6


def glow_shadows(intensity: int, glow_color: str) -> tuple[ShadowTerm, ...]:
    """普通发光阴影列表."""
    blur = intensity * GLOW_BLUR_PER_UNIT
    return tuple(
        ShadowTerm(blur=blur * factor, color=glow_color, alpha=alpha)
        for factor, alpha in GLOW_RINGS
    )


def extrusion_shadows(
    depth: int,
    extrusion_color: str,
    intensity: int,
    glow_color: str,
) -> tuple[ShadowTerm, ...]:
    """3D 挤出阴影列表."""
    shadows = [
        ShadowTerm(offset_x=i, offset_y=i, color=extrusion_color)
        for i in range(1, int(depth) + 1)
    ]
    if intensity > 0:
        shadows.append(
            ShadowTerm(
                blur=intensity * GLOW_BLUR_PER_UNIT,
                color=glow_color,
                alpha=EXTRUSION_GLOW_ALPHA,
            )
        )
    return tuple(shadows)


def build_text_paint(style: StyleConfig) -> TextPaint:
    """根据样式配置计算标题绘制样式.

    Args:
        style: 样式配置

    Returns:
        TextPaint 实例
    """
    if style.text_3d_enabled:
        shadows = extrusion_shadows(
            style.text_3d_depth,
            style.text_3d_color,
            style.glow_intensity,
            style.glow_color,
        )
    elif style.glow_intensity > 0:
        shadows = glow_shadows(style.glow_intensity, style.glow_color)
    else:
        shadows = ()

    stroke = None
    if style.text_stroke_enabled:
        stroke = StrokePaint(color=style.text_stroke_color, width=style.text_stroke_width)

    return TextPaint(fill=style.text_color, shadows=shadows, stroke=stroke)
