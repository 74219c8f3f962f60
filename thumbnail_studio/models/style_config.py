"""样式配置数据模型.

StyleConfig 保存一张缩略图设计的全部可调参数。它是不可变值：
每次修改都通过补丁生成新的实例，旧实例保持不变。

取值不做范围校验，越界值照常渲染（视觉效果可能极端，但不是错误）。
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field

from thumbnail_studio.utils.exceptions import UnknownStyleFieldError


# ===================
# 枚举定义
# ===================


class TextAlign(str, Enum):
    """内容区水平对齐方式."""

    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"


class BadgeLabel(str, Enum):
    """徽章标签."""

    LIVE = "LIVE"
    FOUR_K = "4K"
    PRO = "PRO"
    NEW = "NEW"
    HOT = "HOT"
    FIRE = "🔥"


# ===================
# 样式配置
# ===================


class StyleConfig(BaseModel):
    """缩略图样式配置.

    Attributes:
        main_text: 主标题
        sub_text: 副标题（为空则不显示）
        glow_color: 发光颜色（同时用于右下角漏光）
        accent_color: 强调色（徽章与左上角漏光）
        text_color: 标题颜色
        overlay_opacity: 压暗层不透明度
        blur_amount: 背景模糊半径（像素）
        glow_intensity: 发光强度
        text_position: 内容区对齐方式
        text_offset_x: 内容区水平偏移（像素）
        text_offset_y: 内容区垂直偏移（像素）
        base_font_size: 标题基础字号
        sub_font_size: 副标题字号
        is_modern: True 为无衬线粗体，False 为衬线斜体
        active_badge: 徽章标签，None 表示不显示
        img_brightness / img_contrast / img_saturation: 亮度/对比度/饱和度（百分比）
        img_hue_rotate: 色相旋转（度）
        img_sepia: 褐色调（百分比）
        img_zoom: 缩放（百分比）
        img_rotation: 旋转（度）
        img_offset_x / img_offset_y: 背景平移（像素）
        vignette_strength: 暗角强度

    Example:
        >>> style = StyleConfig()
        >>> darker = style.apply_patch({"overlay_opacity": 0.5})
        >>> style.overlay_opacity, darker.overlay_opacity
        (0.2, 0.5)
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    # 内容
    main_text: str = Field(default="Exclusive", description="主标题")
    sub_text: str = Field(default="Review 2024", description="副标题")

    # 颜色
    glow_color: str = Field(default="#ffffff", description="发光颜色")
    accent_color: str = Field(default="#3b82f6", description="强调色")
    text_color: str = Field(default="#ffffff", description="标题颜色")

    # 基础效果
    overlay_opacity: float = Field(default=0.2, description="压暗层不透明度")
    blur_amount: float = Field(default=0, description="背景模糊")
    glow_intensity: int = Field(default=3, description="发光强度")

    # 文字位置
    text_position: TextAlign = Field(default=TextAlign.CENTER, description="对齐方式")
    text_offset_x: float = Field(default=0, description="内容区水平偏移")
    text_offset_y: float = Field(default=0, description="内容区垂直偏移")

    # 字号与字体
    base_font_size: float = Field(default=120, description="标题基础字号")
    sub_font_size: float = Field(default=24, description="副标题字号")
    is_modern: bool = Field(default=True, description="现代字体")

    # 装饰开关
    show_grain: bool = Field(default=True, description="胶片颗粒")
    show_cinema_bars: bool = Field(default=True, description="电影黑边")
    active_badge: Optional[BadgeLabel] = Field(default=BadgeLabel.NEW, description="徽章")
    show_light_leak: bool = Field(default=True, description="漏光")

    # 调色
    img_brightness: float = Field(default=100, description="亮度")
    img_contrast: float = Field(default=120, description="对比度")
    img_saturation: float = Field(default=100, description="饱和度")
    vignette_strength: float = Field(default=0.4, description="暗角强度")
    img_hue_rotate: float = Field(default=0, description="色相旋转")
    img_sepia: float = Field(default=10, description="褐色调")

    # 背景变换
    img_zoom: float = Field(default=100, description="缩放")
    img_rotation: float = Field(default=0, description="旋转")
    img_offset_x: float = Field(default=0, description="水平平移")
    img_offset_y: float = Field(default=0, description="垂直平移")

    # 渐变叠加
    gradient_enabled: bool = Field(default=False, description="启用渐变")
    gradient_color1: str = Field(default="#ff0080", description="渐变起始色")
    gradient_color2: str = Field(default="#7928ca", description="渐变结束色")
    gradient_angle: float = Field(default=135, description="渐变角度")
    gradient_opacity: float = Field(default=0.3, description="渐变不透明度")

    # 文字描边
    text_stroke_enabled: bool = Field(default=False, description="启用描边")
    text_stroke_color: str = Field(default="#000000", description="描边颜色")
    text_stroke_width: float = Field(default=2, description="描边宽度")

    # 3D 文字
    text_3d_enabled: bool = Field(default=False, description="启用 3D")
    text_3d_color: str = Field(default="#000000", description="3D 挤出颜色")
    text_3d_depth: int = Field(default=4, description="3D 深度")

    # 扫描线
    show_scanlines: bool = Field(default=False, description="扫描线")
    scanlines_opacity: float = Field(default=0.1, description="扫描线不透明度")

    # 色差
    chromatic_enabled: bool = Field(default=True, description="色差")
    chromatic_amount: float = Field(default=3, description="色差偏移")

    @classmethod
    def field_names(cls) -> frozenset[str]:
        """获取全部样式字段名."""
        return frozenset(cls.model_fields)

    def apply_patch(self, patch: Mapping[str, Any]) -> "StyleConfig":
        """应用部分字段补丁，返回新实例.

        补丁中的字段整体替换，未包含的字段保持不变。

        Args:
            patch: 字段名到新值的映射

        Returns:
            新的 StyleConfig 实例

        Raises:
            UnknownStyleFieldError: 补丁包含不存在的字段
        """
        unknown = sorted(set(patch) - self.field_names())
        if unknown:
            raise UnknownStyleFieldError(unknown)
        if not patch:
            return self
        return self.model_validate({**self.model_dump(), **patch})

    def with_value(self, name: str, value: Any) -> "StyleConfig":
        """设置单个字段，返回新实例."""
        return self.apply_patch({name: value})

    def diff(self, other: "StyleConfig") -> dict[str, Any]:
        """比较两个配置，返回 other 中不同的字段值."""
        mine = self.model_dump()
        theirs = other.model_dump()
        return {k: v for k, v in theirs.items() if mine[k] != v}


# 复位背景变换的补丁
RESET_TRANSFORM_PATCH: dict[str, Any] = {
    "img_zoom": 100,
    "img_rotation": 0,
    "img_offset_x": 0,
    "img_offset_y": 0,
}
