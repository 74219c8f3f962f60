"""内容区文字渲染.

负责字体查找和内容图层（徽章、标题、副标题）的排版与绘制。

Features:
    - 按字体风格查找系统字体，找不到时回退到 Pillow 内置字体
    - 标题阴影（发光 / 3D 挤出）、描边、纯色填充
    - 字间距、全大写的副标题与徽章
    - 三种水平对齐、垂直居中与附加像素偏移
"""

from __future__ import annotations

import math
import os
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from pathlib import Path
from typing import Optional, Sequence, Union

from PIL import Image, ImageChops, ImageDraw, ImageFilter, ImageFont

from thumbnail_studio.models.layers import (
    BadgeSpec,
    ContentLayer,
    SubtitleSpec,
    TextPaint,
    TitleSpec,
)
from thumbnail_studio.models.style_config import TextAlign
from thumbnail_studio.services.gradients import colorize
from thumbnail_studio.utils.color_utils import parse_color, with_alpha
from thumbnail_studio.utils.constants import (
    BADGE_BORDER_WIDTH,
    BADGE_FILL_ALPHA,
    BADGE_FONT_SIZE,
    BADGE_GAP,
    BADGE_GLOW_BLUR,
    BADGE_LETTER_SPACING,
    BADGE_LINE_HEIGHT,
    BADGE_PADDING_X,
    BADGE_PADDING_Y,
    CONTENT_PADDING,
    CONTENT_SIDE_INSET,
    SUBTITLE_ALPHA,
    SUBTITLE_GAP,
    SUBTITLE_LETTER_SPACING,
    SUBTITLE_LINE_HEIGHT,
    TITLE_LINE_HEIGHT,
)
from thumbnail_studio.utils.image_utils import transparent_canvas
from thumbnail_studio.utils.logger import setup_logger

logger = setup_logger(__name__)

FontType = Union[ImageFont.FreeTypeFont, ImageFont.ImageFont]


# ===================
# 字体管理
# ===================


class FontStyle(str, Enum):
    """字体风格."""

    SANS_BOLD = "sans_bold"  # 现代标题、徽章
    SERIF_ITALIC = "serif_italic"  # 经典标题
    SANS_MEDIUM = "sans_medium"  # 副标题


# 字体搜索路径
FONT_SEARCH_PATHS: list[str] = [
    "/System/Library/Fonts/",
    "/System/Library/Fonts/Supplemental/",
    "/Library/Fonts/",
    "~/Library/Fonts/",
    "C:/Windows/Fonts/",
    "/usr/share/fonts/",
    "/usr/share/fonts/truetype/",
    "/usr/share/fonts/truetype/dejavu/",
    "/usr/share/fonts/truetype/liberation/",
]

# 各风格的候选字体文件（按优先级）
FONT_CANDIDATES: dict[FontStyle, list[str]] = {
    FontStyle.SANS_BOLD: [
        "Arial Bold.ttf",
        "arialbd.ttf",
        "DejaVuSans-Bold.ttf",
        "LiberationSans-Bold.ttf",
        "Helvetica.ttc",
    ],
    FontStyle.SERIF_ITALIC: [
        "Times New Roman Italic.ttf",
        "timesi.ttf",
        "DejaVuSerif-Italic.ttf",
        "LiberationSerif-Italic.ttf",
        "Times.ttc",
    ],
    FontStyle.SANS_MEDIUM: [
        "Arial.ttf",
        "arial.ttf",
        "DejaVuSans.ttf",
        "LiberationSans-Regular.ttf",
        "Helvetica.ttc",
    ],
}


@lru_cache(maxsize=64)
def find_font(style: FontStyle, font_size: int, extra_dirs: tuple[str, ...] = ()) -> FontType:
    """查找字体.

    Args:
        style: 字体风格
        font_size: 字体大小（像素）
        extra_dirs: 额外的字体目录，优先于系统目录搜索

    Returns:
        ImageFont 对象
    """
    candidates = FONT_CANDIDATES[style]

    for search_path in (*extra_dirs, *FONT_SEARCH_PATHS):
        expanded_path = os.path.expanduser(search_path)
        if not os.path.isdir(expanded_path):
            continue

        for font_name in candidates:
            font_path = os.path.join(expanded_path, font_name)
            if os.path.exists(font_path):
                try:
                    return ImageFont.truetype(font_path, font_size)
                except OSError:
                    continue

    # Pillow 会在系统字体目录中按文件名查找
    for font_name in candidates:
        try:
            return ImageFont.truetype(font_name, font_size)
        except OSError:
            continue

    logger.warning(f"未找到 {style.value} 字体，使用默认字体")
    return ImageFont.load_default(size=font_size)


def _font_px(size: float, unit: float) -> int:
    return max(1, round(size * unit))


# ===================
# 文字测量与绘制
# ===================


def text_width(text: str, font: FontType, letter_spacing: float = 0.0) -> float:
    """测量单行文字宽度（含字间距，每个字符后都追加间距）."""
    if not letter_spacing:
        return font.getlength(text)
    return sum(font.getlength(ch) + letter_spacing for ch in text)


def draw_text_mask(
    mask: Image.Image,
    position: tuple[float, float],
    text: str,
    font: FontType,
    letter_spacing: float = 0.0,
    stroke_width: int = 0,
) -> None:
    """在灰度蒙版上绘制单行文字，position 为行框左上角（字体上沿）."""
    draw = ImageDraw.Draw(mask)
    x, y = position
    if not letter_spacing:
        draw.text((x, y), text, font=font, fill=255, stroke_width=stroke_width, stroke_fill=255)
        return
    for ch in text:
        draw.text((x, y), ch, font=font, fill=255, stroke_width=stroke_width, stroke_fill=255)
        x += font.getlength(ch) + letter_spacing


def _glyph_top(line_top: float, line_height: float, font: FontType) -> float:
    """行框内字形的上沿位置（字形在行高内垂直居中）."""
    if isinstance(font, ImageFont.FreeTypeFont):
        ascent, descent = font.getmetrics()
        return line_top + (line_height - (ascent + descent)) / 2
    return line_top


def _paint(canvas: Image.Image, mask: Image.Image, color: tuple[int, int, int, int]) -> Image.Image:
    """用蒙版把纯色绘制到画布上."""
    return Image.alpha_composite(canvas, colorize(mask, color))


def _shift(mask: Image.Image, dx: float, dy: float) -> Image.Image:
    """平移蒙版（整数像素）."""
    dx, dy = round(dx), round(dy)
    if dx == 0 and dy == 0:
        return mask
    shifted = Image.new("L", mask.size, 0)
    shifted.paste(mask, (dx, dy))
    return shifted


def paint_styled_text(
    canvas: Image.Image,
    glyphs: Image.Image,
    paint: TextPaint,
    unit: float,
    stroke_masks: Optional[tuple[Image.Image, Image.Image]] = None,
) -> Image.Image:
    """按绘制样式绘制文字：阴影 → 填充 → 描边.

    阴影列表中靠前的项绘制在上层，因此倒序绘制。阴影模糊半径按
    高斯标准差 = 半径 / 2 换算。

    Args:
        canvas: RGBA 画布
        glyphs: 字形蒙版
        paint: 绘制样式
        unit: 像素缩放系数
        stroke_masks: (外扩蒙版, 内缩蒙版)，描边为两者之差

    Returns:
        新画布
    """
    for shadow in reversed(paint.shadows):
        shadow_mask = _shift(glyphs, shadow.offset_x * unit, shadow.offset_y * unit)
        radius = max(0.0, shadow.blur) * unit / 2
        if radius > 0:
            shadow_mask = shadow_mask.filter(ImageFilter.GaussianBlur(radius))
        canvas = _paint(canvas, shadow_mask, with_alpha(shadow.color, shadow.alpha))

    canvas = _paint(canvas, glyphs, parse_color(paint.fill))

    if paint.stroke is not None and stroke_masks is not None:
        outer, inner = stroke_masks
        ring = ImageChops.subtract(outer, inner)
        canvas = _paint(canvas, ring, parse_color(paint.stroke.color))

    return canvas


# ===================
# 内容区排版
# ===================


@dataclass
class _Block:
    """内容区中一个纵向排列的元素."""

    width: float
    height: float
    margin_top: float = 0.0


def _align_x(align: TextAlign, canvas_width: float, width: float, unit: float) -> float:
    if align == TextAlign.LEFT:
        return CONTENT_SIDE_INSET * unit
    if align == TextAlign.RIGHT:
        return canvas_width - CONTENT_SIDE_INSET * unit - width
    return (canvas_width - width) / 2


class ContentRenderer:
    """内容图层渲染器.

    所有尺寸常量以布局像素表示，乘以 unit 后得到输出像素。

    Example:
        >>> renderer = ContentRenderer((1024, 576), unit=1.0)
        >>> image = renderer.render(content_layer)
    """

    def __init__(
        self,
        size: tuple[int, int],
        unit: float = 1.0,
        font_dirs: Sequence[Path | str] = (),
    ) -> None:
        """初始化渲染器.

        Args:
            size: 输出尺寸（像素）
            unit: 布局像素到输出像素的缩放系数
            font_dirs: 额外的字体目录
        """
        self.size = size
        self.unit = unit
        self.font_dirs = tuple(str(d) for d in font_dirs)

    def _font(self, style: FontStyle, size: float) -> FontType:
        return find_font(style, _font_px(size, self.unit), self.font_dirs)

    # ---------- 测量 ----------

    def _badge_metrics(self, badge: BadgeSpec) -> tuple[FontType, str, float, _Block]:
        u = self.unit
        font = self._font(FontStyle.SANS_BOLD, BADGE_FONT_SIZE)
        label = badge.label.value.upper()
        spacing = BADGE_LETTER_SPACING * BADGE_FONT_SIZE * u
        inner_width = text_width(label, font, spacing)
        block = _Block(
            width=inner_width + 2 * (BADGE_PADDING_X + BADGE_BORDER_WIDTH) * u,
            height=(BADGE_LINE_HEIGHT + 2 * (BADGE_PADDING_Y + BADGE_BORDER_WIDTH)) * u,
        )
        return font, label, spacing, block

    def _title_metrics(self, title: TitleSpec) -> tuple[FontType, list[str], list[float], _Block]:
        style = FontStyle.SANS_BOLD if title.is_modern else FontStyle.SERIF_ITALIC
        font = self._font(style, title.font_size)
        lines = title.text.split("\n")
        widths = [text_width(line, font) for line in lines]
        line_height = title.font_size * TITLE_LINE_HEIGHT * self.unit
        block = _Block(width=max(widths, default=0.0), height=line_height * len(lines))
        return font, lines, widths, block

    def _subtitle_metrics(self, subtitle: SubtitleSpec) -> tuple[FontType, str, float, _Block]:
        u = self.unit
        font = self._font(FontStyle.SANS_MEDIUM, subtitle.font_size)
        text = subtitle.text.upper()
        spacing = SUBTITLE_LETTER_SPACING * subtitle.font_size * u
        block = _Block(
            width=text_width(text, font, spacing),
            height=subtitle.font_size * SUBTITLE_LINE_HEIGHT * u,
            margin_top=SUBTITLE_GAP * u,
        )
        return font, text, spacing, block

    # ---------- 绘制 ----------

    def render(self, layer: ContentLayer) -> Image.Image:
        """渲染内容图层.

        Args:
            layer: 内容图层描述

        Returns:
            与输出同尺寸的 RGBA 图层
        """
        u = self.unit
        width, height = self.size
        canvas = transparent_canvas(self.size)

        badge = self._badge_metrics(layer.badge) if layer.badge else None
        title = self._title_metrics(layer.title)
        subtitle = self._subtitle_metrics(layer.subtitle) if layer.subtitle else None

        blocks = [title[3]]
        if badge:
            title[3].margin_top = BADGE_GAP * u
            blocks.insert(0, badge[3])
        if subtitle:
            blocks.append(subtitle[3])

        total_height = sum(b.height + b.margin_top for b in blocks)
        padding = CONTENT_PADDING * u
        top = padding + (height - 2 * padding - total_height) / 2 + layer.offset_y * u
        dx = layer.offset_x * u

        if badge:
            font, label, spacing, block = badge
            x = _align_x(layer.align, width, block.width, u) + dx
            canvas = self._draw_badge(canvas, layer.badge, (x, top), block, font, label, spacing)
            top += block.height

        font, lines, widths, block = title
        top += block.margin_top
        canvas = self._draw_title(canvas, layer, (top, dx), font, lines, widths)
        top += block.height

        if subtitle:
            font, text, spacing, block = subtitle
            top += block.margin_top
            x = _align_x(layer.align, width, block.width, u) + dx
            canvas = self._draw_subtitle(canvas, (x, top), block, font, text, spacing)

        return canvas

    def _draw_badge(
        self,
        canvas: Image.Image,
        badge: BadgeSpec,
        origin: tuple[float, float],
        block: _Block,
        font: FontType,
        label: str,
        spacing: float,
    ) -> Image.Image:
        """绘制徽章：强调色光晕、半透明胶囊、边框与白色文字."""
        u = self.unit
        x, y = origin
        box = (round(x), round(y), round(x + block.width), round(y + block.height))
        radius = round(block.height / 2)

        pill = Image.new("L", self.size, 0)
        ImageDraw.Draw(pill).rounded_rectangle(box, radius, fill=255)

        glow = pill.filter(ImageFilter.GaussianBlur(BADGE_GLOW_BLUR * u / 2))
        canvas = _paint(canvas, glow, with_alpha(badge.accent_color, BADGE_FILL_ALPHA))
        canvas = _paint(canvas, pill, with_alpha(badge.accent_color, BADGE_FILL_ALPHA))

        border = Image.new("L", self.size, 0)
        ImageDraw.Draw(border).rounded_rectangle(
            box, radius, outline=255, width=max(1, round(BADGE_BORDER_WIDTH * u))
        )
        canvas = _paint(canvas, border, parse_color(badge.accent_color))

        text_x = x + (BADGE_PADDING_X + BADGE_BORDER_WIDTH) * u
        line_top = y + (BADGE_PADDING_Y + BADGE_BORDER_WIDTH) * u
        glyphs = Image.new("L", self.size, 0)
        draw_text_mask(
            glyphs,
            (text_x, _glyph_top(line_top, BADGE_LINE_HEIGHT * u, font)),
            label,
            font,
            spacing,
        )
        return _paint(canvas, glyphs, (255, 255, 255, 255))

    def _draw_title(
        self,
        canvas: Image.Image,
        layer: ContentLayer,
        position: tuple[float, float],
        font: FontType,
        lines: list[str],
        widths: list[float],
    ) -> Image.Image:
        """绘制标题（逐行对齐）."""
        u = self.unit
        top, dx = position
        paint = layer.title.paint
        line_height = layer.title.font_size * TITLE_LINE_HEIGHT * u

        glyphs = Image.new("L", self.size, 0)
        outer = inner = None
        grow_px = shrink_px = 0
        if paint.stroke is not None:
            # 描边以字形轮廓为中心：外扩取上整、内缩取下整，两者之和等于描边宽度
            half = max(0.0, paint.stroke.width * u) / 2
            grow_px, shrink_px = math.ceil(half), math.floor(half)
            outer = Image.new("L", self.size, 0)

        for i, line in enumerate(lines):
            if not line:
                continue
            x = _align_x(layer.align, self.size[0], widths[i], u) + dx
            y = _glyph_top(top + i * line_height, line_height, font)
            draw_text_mask(glyphs, (x, y), line, font)
            if outer is not None:
                draw_text_mask(outer, (x, y), line, font, stroke_width=grow_px)

        stroke_masks = None
        if outer is not None:
            inner = glyphs.filter(ImageFilter.MinFilter(2 * shrink_px + 1)) if shrink_px else glyphs
            stroke_masks = (outer, inner)

        return paint_styled_text(canvas, glyphs, paint, u, stroke_masks)

    def _draw_subtitle(
        self,
        canvas: Image.Image,
        origin: tuple[float, float],
        block: _Block,
        font: FontType,
        text: str,
        spacing: float,
    ) -> Image.Image:
        """绘制副标题：全大写、加宽字距、白色 81% 不透明."""
        x, top = origin
        glyphs = Image.new("L", self.size, 0)
        draw_text_mask(glyphs, (x, _glyph_top(top, block.height, font)), text, font, spacing)
        return _paint(canvas, glyphs, with_alpha("#ffffff", SUBTITLE_ALPHA))


def render_content(
    layer: ContentLayer,
    size: tuple[int, int],
    unit: float = 1.0,
    font_dirs: Sequence[Path | str] = (),
) -> Image.Image:
    """渲染内容图层（便捷函数）."""
    return ContentRenderer(size, unit, font_dirs).render(layer)
