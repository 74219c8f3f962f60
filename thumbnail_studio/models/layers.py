"""图层描述数据模型.

图层描述是从样式配置派生出的临时值，每个激活的可视图层一个。
每次样式或背景图片变化都会整体重新计算，描述本身不可变、不跨渲染保留身份。

Features:
    - 带标签的图层变体（背景、色差、渐变、漏光、压暗、暗角、颗粒、扫描线、黑边、内容、反光）
    - 固定的绘制顺序索引
    - 滤镜链与几何变换的有序操作列表
    - 标题绘制样式（阴影、描边、填充）
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from thumbnail_studio.models.image_asset import ImageAsset
from thumbnail_studio.models.style_config import BadgeLabel, TextAlign


# ===================
# 枚举定义
# ===================


class LayerKind(str, Enum):
    """图层类型枚举."""

    BACKGROUND = "background"  # 背景图片或占位图案
    GHOST = "ghost"  # 色差重影
    GRADIENT = "gradient"  # 渐变叠加
    LIGHT_LEAK = "light_leak"  # 漏光
    DIM = "dim"  # 压暗
    VIGNETTE = "vignette"  # 暗角
    GRAIN = "grain"  # 胶片颗粒
    SCANLINES = "scanlines"  # 扫描线
    CINEMA_BARS = "cinema_bars"  # 电影黑边
    CONTENT = "content"  # 徽章、标题、副标题
    REFLECTION = "reflection"  # 玻璃反光


class BlendMode(str, Enum):
    """混合模式."""

    NORMAL = "normal"
    SCREEN = "screen"
    MULTIPLY = "multiply"
    OVERLAY = "overlay"


class FilterName(str, Enum):
    """滤镜名称."""

    BRIGHTNESS = "brightness"  # 百分比
    CONTRAST = "contrast"  # 百分比
    SATURATE = "saturate"  # 百分比
    BLUR = "blur"  # 像素
    HUE_ROTATE = "hue-rotate"  # 度
    SEPIA = "sepia"  # 百分比


class GhostChannel(str, Enum):
    """色差重影通道."""

    A = "a"  # 右移，滤色
    B = "b"  # 左移，正片叠底，色相再旋转 120°


class LeakCorner(str, Enum):
    """漏光位置."""

    TOP_LEFT = "top_left"
    BOTTOM_RIGHT = "bottom_right"


# 固定绘制顺序（自底向上）
LAYER_Z_ORDER: dict[LayerKind, int] = {
    LayerKind.BACKGROUND: 1,
    LayerKind.GHOST: 2,
    LayerKind.GRADIENT: 3,
    LayerKind.LIGHT_LEAK: 4,
    LayerKind.DIM: 5,
    LayerKind.VIGNETTE: 6,
    LayerKind.GRAIN: 7,
    LayerKind.SCANLINES: 8,
    LayerKind.CINEMA_BARS: 9,
    LayerKind.CONTENT: 10,
    LayerKind.REFLECTION: 11,
}


# ===================
# 滤镜与变换操作
# ===================


class FilterOp(BaseModel):
    """单个滤镜操作."""

    model_config = ConfigDict(frozen=True)

    name: FilterName
    value: float


class ScaleOp(BaseModel):
    """缩放（倍数）."""

    model_config = ConfigDict(frozen=True)

    op: Literal["scale"] = "scale"
    factor: float


class RotateOp(BaseModel):
    """旋转（度，顺时针）."""

    model_config = ConfigDict(frozen=True)

    op: Literal["rotate"] = "rotate"
    degrees: float


class TranslateOp(BaseModel):
    """平移（像素）."""

    model_config = ConfigDict(frozen=True)

    op: Literal["translate"] = "translate"
    x: float = 0
    y: float = 0


TransformOp = Annotated[Union[ScaleOp, RotateOp, TranslateOp], Field(discriminator="op")]


# ===================
# 文字绘制样式
# ===================


class ShadowTerm(BaseModel):
    """单个阴影项.

    Attributes:
        offset_x: 水平偏移（像素）
        offset_y: 垂直偏移（像素）
        blur: 模糊半径（像素）
        color: 颜色
        alpha: 相对颜色的不透明度倍数
    """

    model_config = ConfigDict(frozen=True)

    offset_x: float = 0
    offset_y: float = 0
    blur: float = 0
    color: str
    alpha: float = 1.0


class StrokePaint(BaseModel):
    """文字描边."""

    model_config = ConfigDict(frozen=True)

    color: str
    width: float


class TextPaint(BaseModel):
    """标题绘制样式.

    阴影按列表顺序书写，列表靠前的阴影绘制在上层。
    """

    model_config = ConfigDict(frozen=True)

    fill: str
    shadows: tuple[ShadowTerm, ...] = ()
    stroke: Optional[StrokePaint] = None


# ===================
# 图层基类
# ===================


class LayerDescriptor(BaseModel):
    """图层描述基类.

    Attributes:
        kind: 图层类型
        z_index: 固定绘制顺序索引
        blend_mode: 混合模式
        opacity: 不透明度（0-1）
        visible: 是否可见
    """

    model_config = ConfigDict(frozen=True)

    kind: LayerKind
    z_index: int
    blend_mode: BlendMode = BlendMode.NORMAL
    opacity: float = 1.0
    visible: bool = True


class BackgroundLayer(LayerDescriptor):
    """背景图层.

    有图片时按滤镜链和变换绘制图片，否则绘制中性占位图案。
    """

    kind: Literal[LayerKind.BACKGROUND] = LayerKind.BACKGROUND
    z_index: int = LAYER_Z_ORDER[LayerKind.BACKGROUND]
    image: Optional[ImageAsset] = None
    filters: tuple[FilterOp, ...] = ()
    transform: tuple[TransformOp, ...] = ()

    @property
    def is_placeholder(self) -> bool:
        """是否为占位图案."""
        return self.image is None


class GhostLayer(LayerDescriptor):
    """色差重影图层：背景的偏移副本."""

    kind: Literal[LayerKind.GHOST] = LayerKind.GHOST
    z_index: int = LAYER_Z_ORDER[LayerKind.GHOST]
    channel: GhostChannel
    image: ImageAsset
    filters: tuple[FilterOp, ...] = ()
    transform: tuple[TransformOp, ...] = ()


class GradientLayer(LayerDescriptor):
    """线性渐变叠加图层."""

    kind: Literal[LayerKind.GRADIENT] = LayerKind.GRADIENT
    z_index: int = LAYER_Z_ORDER[LayerKind.GRADIENT]
    color_from: str
    color_to: str
    angle: float


class LightLeakLayer(LayerDescriptor):
    """漏光图层：固定角落的径向渐变.

    Attributes:
        corner: 渐变圆心所在角落
        color: 着色
        color_alpha: 圆心处颜色不透明度
        box_ratio: 渐变区域占画布的比例
        fade_stop: 渐变透明终点（半径比例）
    """

    kind: Literal[LayerKind.LIGHT_LEAK] = LayerKind.LIGHT_LEAK
    z_index: int = LAYER_Z_ORDER[LayerKind.LIGHT_LEAK]
    corner: LeakCorner
    color: str
    color_alpha: float
    box_ratio: float
    fade_stop: float


class DimLayer(LayerDescriptor):
    """压暗图层：纯色填充."""

    kind: Literal[LayerKind.DIM] = LayerKind.DIM
    z_index: int = LAYER_Z_ORDER[LayerKind.DIM]
    color: str = "#000000"


class VignetteLayer(LayerDescriptor):
    """暗角图层：中心透明到边缘黑色的径向渐变."""

    kind: Literal[LayerKind.VIGNETTE] = LayerKind.VIGNETTE
    z_index: int = LAYER_Z_ORDER[LayerKind.VIGNETTE]
    inner_stop: float
    outer_stop: float


class GrainLayer(LayerDescriptor):
    """胶片颗粒图层：平铺噪点纹理."""

    kind: Literal[LayerKind.GRAIN] = LayerKind.GRAIN
    z_index: int = LAYER_Z_ORDER[LayerKind.GRAIN]
    tile_size: int
    seed: int


class ScanlinesLayer(LayerDescriptor):
    """扫描线图层：重复的水平条纹."""

    kind: Literal[LayerKind.SCANLINES] = LayerKind.SCANLINES
    z_index: int = LAYER_Z_ORDER[LayerKind.SCANLINES]
    line_alpha: float
    gap: float
    period: float


class CinemaBarsLayer(LayerDescriptor):
    """电影黑边图层：顶部和底部各一条全宽黑带."""

    kind: Literal[LayerKind.CINEMA_BARS] = LayerKind.CINEMA_BARS
    z_index: int = LAYER_Z_ORDER[LayerKind.CINEMA_BARS]
    bar_ratio: float


class BadgeSpec(BaseModel):
    """徽章."""

    model_config = ConfigDict(frozen=True)

    label: BadgeLabel
    accent_color: str


class TitleSpec(BaseModel):
    """标题."""

    model_config = ConfigDict(frozen=True)

    text: str
    font_size: float
    is_modern: bool
    paint: TextPaint


class SubtitleSpec(BaseModel):
    """副标题."""

    model_config = ConfigDict(frozen=True)

    text: str
    font_size: float


class ContentLayer(LayerDescriptor):
    """内容图层：徽章、标题和副标题.

    默认垂直居中，按对齐方式水平放置，最后叠加像素偏移。
    """

    kind: Literal[LayerKind.CONTENT] = LayerKind.CONTENT
    z_index: int = LAYER_Z_ORDER[LayerKind.CONTENT]
    badge: Optional[BadgeSpec] = None
    title: TitleSpec
    subtitle: Optional[SubtitleSpec] = None
    align: TextAlign = TextAlign.CENTER
    offset_x: float = 0
    offset_y: float = 0


class ReflectionLayer(LayerDescriptor):
    """玻璃反光图层：固定的对角线渐变，始终位于最上层."""

    kind: Literal[LayerKind.REFLECTION] = LayerKind.REFLECTION
    z_index: int = LAYER_Z_ORDER[LayerKind.REFLECTION]
    angle: float
    alpha: float


AnyLayer = Annotated[
    Union[
        BackgroundLayer,
        GhostLayer,
        GradientLayer,
        LightLeakLayer,
        DimLayer,
        VignetteLayer,
        GrainLayer,
        ScanlinesLayer,
        CinemaBarsLayer,
        ContentLayer,
        ReflectionLayer,
    ],
    Field(discriminator="kind"),
]
