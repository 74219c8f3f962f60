"""图层合成服务.

把图层描述列表按顺序绘制到 16:9 画布上。所有几何尺寸以布局像素表示，
乘以 unit 后得到输出像素：屏幕预览时 unit 为 1，导出时 unit 为
导出宽度与屏幕宽度之比，因此两者的相对几何完全一致。

画布从不透明黑色开始，每个可见图层按自身混合模式和不透明度依次合成。
"""

from __future__ import annotations

import math
import random
from functools import lru_cache
from pathlib import Path
from typing import Callable, Sequence, Union

from PIL import Image, ImageDraw

from thumbnail_studio.core.geometry import IDENTITY, pillow_coefficients
from thumbnail_studio.models.layers import (
    AnyLayer,
    BackgroundLayer,
    CinemaBarsLayer,
    ContentLayer,
    DimLayer,
    GhostLayer,
    GradientLayer,
    GrainLayer,
    LayerKind,
    LeakCorner,
    LightLeakLayer,
    ReflectionLayer,
    ScanlinesLayer,
    VignetteLayer,
)
from thumbnail_studio.services.gradients import (
    colorize,
    linear_gradient_mask,
    radial_gradient_mask,
    remap,
    two_color_gradient,
)
from thumbnail_studio.services.image_filters import apply_filters, blend_onto, solid_fill
from thumbnail_studio.services.text_renderer import render_content
from thumbnail_studio.utils.color_utils import parse_color, with_alpha
from thumbnail_studio.utils.constants import (
    CANVAS_ASPECT_RATIO,
    PLACEHOLDER_CELL_SIZE,
    PLACEHOLDER_FROM_COLOR,
    PLACEHOLDER_PATTERN_OPACITY,
    PLACEHOLDER_TO_COLOR,
)
from thumbnail_studio.utils.image_utils import decode_data_url, fit_cover, transparent_canvas
from thumbnail_studio.utils.logger import setup_logger

logger = setup_logger(__name__)

Size = tuple[int, int]

# 颗粒源纹理边长（平铺前放大到图层的 tile_size）
_GRAIN_SOURCE_SIZE = 50

# 颗粒纹理的灰度取值
_GRAIN_LEVELS = (0x00, 0x39, 0x42, 0x44, 0x69)


def canvas_size_for_width(width: int) -> Size:
    """按 16:9 计算画布尺寸."""
    ratio_w, ratio_h = CANVAS_ASPECT_RATIO
    return (width, round(width * ratio_h / ratio_w))


@lru_cache(maxsize=4)
def _grain_source(seed: int) -> Image.Image:
    """生成确定性的颗粒源纹理（相同种子结果相同）."""
    rng = random.Random(seed)
    data = []
    for _ in range(_GRAIN_SOURCE_SIZE * _GRAIN_SOURCE_SIZE):
        level = rng.choice(_GRAIN_LEVELS)
        alpha = rng.choice((0, 0, 0xFE, 0xFF))
        data.append((level, level, level, alpha))
    tile = Image.new("RGBA", (_GRAIN_SOURCE_SIZE, _GRAIN_SOURCE_SIZE))
    tile.putdata(data)
    return tile


class Compositor:
    """图层合成器.

    Example:
        >>> compositor = Compositor()
        >>> image = compositor.compose(build_layer_stack(style), (960, 540))
    """

    def __init__(self, font_dirs: Sequence[Path | str] = ()) -> None:
        """初始化合成器.

        Args:
            font_dirs: 额外的字体目录，只对本合成器生效
        """
        self.font_dirs = tuple(str(d) for d in font_dirs)
        self._renderers: dict[LayerKind, Callable[..., Image.Image]] = {
            LayerKind.BACKGROUND: self._render_background,
            LayerKind.GHOST: self._render_ghost,
            LayerKind.GRADIENT: self._render_gradient,
            LayerKind.LIGHT_LEAK: self._render_light_leak,
            LayerKind.DIM: self._render_dim,
            LayerKind.VIGNETTE: self._render_vignette,
            LayerKind.GRAIN: self._render_grain,
            LayerKind.SCANLINES: self._render_scanlines,
            LayerKind.CINEMA_BARS: self._render_cinema_bars,
            LayerKind.CONTENT: self._render_content,
            LayerKind.REFLECTION: self._render_reflection,
        }

    def compose(
        self,
        layers: Sequence[AnyLayer],
        size: Size,
        unit: float = 1.0,
    ) -> Image.Image:
        """合成图层列表.

        Args:
            layers: 自底向上的图层描述
            size: 输出尺寸（像素）
            unit: 布局像素到输出像素的缩放系数

        Returns:
            不透明 RGBA 图片
        """
        logger.debug(f"合成图层: 数量={len(layers)}, 尺寸={size}, 缩放={unit:.3f}")

        canvas = Image.new("RGBA", size, (0, 0, 0, 255))
        for layer in layers:
            if not layer.visible:
                continue
            content = self.render_layer(layer, size, unit)
            canvas = blend_onto(canvas, content, layer.blend_mode, layer.opacity)
        return canvas

    def render_layer(self, layer: AnyLayer, size: Size, unit: float = 1.0) -> Image.Image:
        """渲染单个图层内容（不含图层不透明度和混合模式）."""
        return self._renderers[layer.kind](layer, size, unit)

    # ===================
    # 背景
    # ===================

    def _render_image(
        self,
        layer: Union[BackgroundLayer, GhostLayer],
        size: Size,
        unit: float,
    ) -> Image.Image:
        """覆盖模式填满画布，依次应用滤镜链和绕中心的变换."""
        image = fit_cover(decode_data_url(layer.image.data_url), size)
        image = apply_filters(image, layer.filters, unit)

        if not layer.transform:
            return image

        coefficients = pillow_coefficients(layer.transform, size, unit)
        if coefficients is None:
            # 退化变换（缩放为 0）不产生任何像素
            return transparent_canvas(size)

        if coefficients == IDENTITY:
            return image

        return image.transform(
            size,
            Image.Transform.AFFINE,
            coefficients,
            resample=Image.Resampling.BICUBIC,
            fillcolor=(0, 0, 0, 0),
        )

    def _render_placeholder(self, size: Size, unit: float) -> Image.Image:
        """中性占位图案：深灰到黑的对角渐变加淡网格."""
        width, height = size
        angle = 180 - math.degrees(math.atan2(height, width))
        base = two_color_gradient(
            linear_gradient_mask(size, angle),
            parse_color(PLACEHOLDER_FROM_COLOR),
            parse_color(PLACEHOLDER_TO_COLOR),
        )

        pattern = transparent_canvas(size)
        draw = ImageDraw.Draw(pattern)
        cell = max(2.0, PLACEHOLDER_CELL_SIZE * unit)
        line = with_alpha("#ffffff", 0.1)
        x = 0.0
        while x < width:
            draw.line([(round(x), 0), (round(x), height)], fill=line)
            x += cell
        y = 0.0
        while y < height:
            draw.line([(0, round(y)), (width, round(y))], fill=line)
            y += cell

        return blend_onto(base, pattern, opacity=PLACEHOLDER_PATTERN_OPACITY)

    def _render_background(self, layer: BackgroundLayer, size: Size, unit: float) -> Image.Image:
        if layer.is_placeholder:
            return self._render_placeholder(size, unit)
        return self._render_image(layer, size, unit)

    def _render_ghost(self, layer: GhostLayer, size: Size, unit: float) -> Image.Image:
        return self._render_image(layer, size, unit)

    # ===================
    # 叠加效果
    # ===================

    def _render_gradient(self, layer: GradientLayer, size: Size, unit: float) -> Image.Image:
        return two_color_gradient(
            linear_gradient_mask(size, layer.angle),
            parse_color(layer.color_from),
            parse_color(layer.color_to),
        )

    def _render_light_leak(self, layer: LightLeakLayer, size: Size, unit: float) -> Image.Image:
        """角落径向渐变：圆心在区域角点，半径为区域对角线."""
        width, height = size
        box_w, box_h = width * layer.box_ratio, height * layer.box_ratio
        if layer.corner == LeakCorner.TOP_LEFT:
            box = (0, 0, round(box_w), round(box_h))
            center = (0.0, 0.0)
        else:
            box = (width - round(box_w), height - round(box_h), width, height)
            center = (box_w, box_h)

        region = (box[2] - box[0], box[3] - box[1])
        if region[0] <= 0 or region[1] <= 0:
            return transparent_canvas(size)

        stop = max(layer.fade_stop, 1e-6)
        mask = radial_gradient_mask(region, center, math.hypot(box_w, box_h), stop)
        mask = remap(mask, lambda v: 1 - v)
        leak = colorize(mask, with_alpha(layer.color, layer.color_alpha))

        result = transparent_canvas(size)
        result.paste(leak, box[:2])
        return result

    def _render_dim(self, layer: DimLayer, size: Size, unit: float) -> Image.Image:
        return solid_fill(size, parse_color(layer.color))

    def _render_vignette(self, layer: VignetteLayer, size: Size, unit: float) -> Image.Image:
        """中心透明、向边缘渐黑；100% 半径为画布半对角线."""
        width, height = size
        inner, outer = layer.inner_stop, layer.outer_stop
        span = max(outer - inner, 1e-6)
        mask = radial_gradient_mask(size, (width / 2, height / 2), math.hypot(width, height) / 2, outer)
        mask = remap(mask, lambda v: (v * outer - inner) / span)
        return colorize(mask, (0, 0, 0, 255))

    def _render_grain(self, layer: GrainLayer, size: Size, unit: float) -> Image.Image:
        tile_px = max(1, round(layer.tile_size * unit))
        tile = _grain_source(layer.seed).resize((tile_px, tile_px), Image.Resampling.NEAREST)

        result = transparent_canvas(size)
        for y in range(0, size[1], tile_px):
            for x in range(0, size[0], tile_px):
                result.paste(tile, (x, y))
        return result

    def _render_scanlines(self, layer: ScanlinesLayer, size: Size, unit: float) -> Image.Image:
        """水平条纹：从底边起每个周期先透明 gap，再黑色到周期结束."""
        width, height = size
        period = max(layer.period, 1e-6)
        column = Image.new("L", (1, height), 0)
        values = []
        for y in range(height):
            distance = (height - y - 0.5) / unit
            values.append(255 if distance % period >= layer.gap else 0)
        column.putdata(values)
        mask = column.resize((width, height), Image.Resampling.NEAREST)
        return colorize(mask, with_alpha("#000000", layer.line_alpha))

    def _render_cinema_bars(self, layer: CinemaBarsLayer, size: Size, unit: float) -> Image.Image:
        width, height = size
        bar = round(height * layer.bar_ratio)
        result = transparent_canvas(size)
        if bar > 0:
            draw = ImageDraw.Draw(result)
            draw.rectangle([0, 0, width - 1, bar - 1], fill=(0, 0, 0, 255))
            draw.rectangle([0, height - bar, width - 1, height - 1], fill=(0, 0, 0, 255))
        return result

    # ===================
    # 内容与反光
    # ===================

    def _render_content(self, layer: ContentLayer, size: Size, unit: float) -> Image.Image:
        return render_content(layer, size, unit, self.font_dirs)

    def _render_reflection(self, layer: ReflectionLayer, size: Size, unit: float) -> Image.Image:
        white = with_alpha("#ffffff", layer.alpha)
        return two_color_gradient(
            linear_gradient_mask(size, layer.angle),
            white,
            (*white[:3], 0),
        )
