"""图层栈派生.

将样式配置与背景图片转换为按固定顺序排列的图层描述列表（自底向上）：

1. 背景（图片或占位图案）
2. 色差重影 ×2（可选，仅有图片时）
3. 渐变叠加（可选）
4. 漏光 ×2（可选）
5. 压暗
6. 暗角
7. 胶片颗粒（可选）
8. 扫描线（可选）
9. 电影黑边（可选）
10. 内容（徽章、标题、副标题）
11. 玻璃反光

各图层可以单独关闭，但相对顺序永远不变；关闭的图层直接缺席。
同样的输入总是得到完全相同的列表，不依赖随机数或系统时间。
"""

from __future__ import annotations

from typing import Optional

from thumbnail_studio.core.font_size import resolve_font_size
from thumbnail_studio.core.text_styler import build_text_paint
from thumbnail_studio.models.image_asset import ImageAsset
from thumbnail_studio.models.layers import (
    AnyLayer,
    BackgroundLayer,
    BadgeSpec,
    BlendMode,
    CinemaBarsLayer,
    ContentLayer,
    DimLayer,
    FilterName,
    FilterOp,
    GhostChannel,
    GhostLayer,
    GradientLayer,
    GrainLayer,
    LeakCorner,
    LightLeakLayer,
    ReflectionLayer,
    RotateOp,
    ScaleOp,
    ScanlinesLayer,
    SubtitleSpec,
    TitleSpec,
    TransformOp,
    TranslateOp,
    VignetteLayer,
)
from thumbnail_studio.models.style_config import StyleConfig
from thumbnail_studio.utils.constants import (
    CINEMA_BAR_RATIO,
    GHOST_HUE_SHIFT,
    GHOST_OPACITY,
    GRAIN_OPACITY,
    GRAIN_SEED,
    GRAIN_TILE_SIZE,
    LIGHT_LEAK_BOTTOM_RIGHT_ALPHA,
    LIGHT_LEAK_BOTTOM_RIGHT_BOX,
    LIGHT_LEAK_BOTTOM_RIGHT_OPACITY,
    LIGHT_LEAK_BOTTOM_RIGHT_STOP,
    LIGHT_LEAK_TOP_LEFT_ALPHA,
    LIGHT_LEAK_TOP_LEFT_BOX,
    LIGHT_LEAK_TOP_LEFT_OPACITY,
    LIGHT_LEAK_TOP_LEFT_STOP,
    REFLECTION_ALPHA,
    REFLECTION_ANGLE,
    SCANLINE_GAP,
    SCANLINE_PERIOD,
    VIGNETTE_INNER_STOP,
    VIGNETTE_OUTER_STOP,
)
from thumbnail_studio.utils.logger import setup_logger

logger = setup_logger(__name__)


# ===================
# 背景滤镜与变换
# ===================


def image_filters(style: StyleConfig) -> tuple[FilterOp, ...]:
    """背景滤镜链：亮度 → 对比度 → 饱和度 → 模糊 → 色相 → 褐色调."""
    return (
        FilterOp(name=FilterName.BRIGHTNESS, value=style.img_brightness),
        FilterOp(name=FilterName.CONTRAST, value=style.img_contrast),
        FilterOp(name=FilterName.SATURATE, value=style.img_saturation),
        FilterOp(name=FilterName.BLUR, value=style.blur_amount),
        FilterOp(name=FilterName.HUE_ROTATE, value=style.img_hue_rotate),
        FilterOp(name=FilterName.SEPIA, value=style.img_sepia),
    )


def image_transform(style: StyleConfig) -> tuple[TransformOp, ...]:
    """背景变换：缩放 → 旋转 → 平移，以图片中心为原点."""
    return (
        ScaleOp(factor=style.img_zoom / 100),
        RotateOp(degrees=style.img_rotation),
        TranslateOp(x=style.img_offset_x, y=style.img_offset_y),
    )


# ===================
# 各图层构建
# ===================


def background_layer(style: StyleConfig, image: Optional[ImageAsset]) -> BackgroundLayer:
    if image is None:
        return BackgroundLayer()
    return BackgroundLayer(
        image=image,
        filters=image_filters(style),
        transform=image_transform(style),
    )


def ghost_layers(style: StyleConfig, image: ImageAsset) -> tuple[GhostLayer, GhostLayer]:
    """色差重影：与背景完全相同的滤镜和变换，各追加一个差异."""
    filters = image_filters(style)
    transform = image_transform(style)
    amount = style.chromatic_amount

    ghost_a = GhostLayer(
        channel=GhostChannel.A,
        image=image,
        filters=filters,
        transform=(*transform, TranslateOp(x=amount)),
        blend_mode=BlendMode.SCREEN,
        opacity=GHOST_OPACITY,
    )
    ghost_b = GhostLayer(
        channel=GhostChannel.B,
        image=image,
        filters=(*filters, FilterOp(name=FilterName.HUE_ROTATE, value=GHOST_HUE_SHIFT)),
        transform=(*transform, TranslateOp(x=-amount)),
        blend_mode=BlendMode.MULTIPLY,
        opacity=GHOST_OPACITY,
    )
    return ghost_a, ghost_b


def gradient_layer(style: StyleConfig) -> GradientLayer:
    return GradientLayer(
        color_from=style.gradient_color1,
        color_to=style.gradient_color2,
        angle=style.gradient_angle,
        blend_mode=BlendMode.OVERLAY,
        opacity=style.gradient_opacity,
    )


def light_leak_layers(style: StyleConfig) -> tuple[LightLeakLayer, LightLeakLayer]:
    """漏光：位置、半径与不透明度均为常量，只有颜色随样式变化."""
    return (
        LightLeakLayer(
            corner=LeakCorner.TOP_LEFT,
            color=style.accent_color,
            color_alpha=LIGHT_LEAK_TOP_LEFT_ALPHA,
            box_ratio=LIGHT_LEAK_TOP_LEFT_BOX,
            fade_stop=LIGHT_LEAK_TOP_LEFT_STOP,
            opacity=LIGHT_LEAK_TOP_LEFT_OPACITY,
        ),
        LightLeakLayer(
            corner=LeakCorner.BOTTOM_RIGHT,
            color=style.glow_color,
            color_alpha=LIGHT_LEAK_BOTTOM_RIGHT_ALPHA,
            box_ratio=LIGHT_LEAK_BOTTOM_RIGHT_BOX,
            fade_stop=LIGHT_LEAK_BOTTOM_RIGHT_STOP,
            opacity=LIGHT_LEAK_BOTTOM_RIGHT_OPACITY,
        ),
    )


def content_layer(style: StyleConfig) -> ContentLayer:
    badge = None
    if style.active_badge is not None:
        badge = BadgeSpec(label=style.active_badge, accent_color=style.accent_color)

    subtitle = None
    if style.sub_text:
        subtitle = SubtitleSpec(text=style.sub_text, font_size=style.sub_font_size)

    return ContentLayer(
        badge=badge,
        title=TitleSpec(
            text=style.main_text,
            font_size=resolve_font_size(style.main_text, style.base_font_size),
            is_modern=style.is_modern,
            paint=build_text_paint(style),
        ),
        subtitle=subtitle,
        align=style.text_position,
        offset_x=style.text_offset_x,
        offset_y=style.text_offset_y,
    )


# ===================
# 图层栈
# ===================


def build_layer_stack(
    style: StyleConfig,
    image: Optional[ImageAsset] = None,
) -> list[AnyLayer]:
    """派生有序图层列表.

    Args:
        style: 样式配置
        image: 背景图片，None 表示使用占位图案

    Returns:
        自底向上排列的图层描述列表
    """
    layers: list[AnyLayer] = [background_layer(style, image)]

    if image is not None and style.chromatic_enabled:
        layers.extend(ghost_layers(style, image))

    if style.gradient_enabled:
        layers.append(gradient_layer(style))

    if style.show_light_leak:
        layers.extend(light_leak_layers(style))

    layers.append(DimLayer(opacity=style.overlay_opacity))

    layers.append(
        VignetteLayer(
            inner_stop=VIGNETTE_INNER_STOP,
            outer_stop=VIGNETTE_OUTER_STOP,
            opacity=style.vignette_strength,
        )
    )

    if style.show_grain:
        layers.append(GrainLayer(tile_size=GRAIN_TILE_SIZE, seed=GRAIN_SEED, opacity=GRAIN_OPACITY))

    if style.show_scanlines:
        layers.append(
            ScanlinesLayer(
                line_alpha=style.scanlines_opacity,
                gap=SCANLINE_GAP,
                period=SCANLINE_PERIOD,
            )
        )

    if style.show_cinema_bars:
        layers.append(CinemaBarsLayer(bar_ratio=CINEMA_BAR_RATIO))

    layers.append(content_layer(style))
    layers.append(ReflectionLayer(angle=REFLECTION_ANGLE, alpha=REFLECTION_ALPHA))

    logger.debug(f"图层栈派生完成: {[layer.kind.value for layer in layers]}")
    return layers
