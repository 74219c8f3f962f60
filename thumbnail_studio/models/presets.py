"""预设样式.

每个预设是一个部分 StyleConfig 补丁，通过 ``StyleConfig.apply_patch``
一次性原子替换指定字段，其余字段保持不变。
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping

from thumbnail_studio.models.style_config import StyleConfig


class Preset(str, Enum):
    """预设标识."""

    NONE = "none"
    CINEMATIC = "cinematic"
    NEON = "neon"
    VINTAGE = "vintage"
    DRAMATIC = "dramatic"
    COOL = "cool"
    WARM = "warm"


@dataclass(frozen=True)
class PresetDefinition:
    """预设定义.

    Attributes:
        key: 预设标识
        name: 显示名称
        icon: 图标
        patch: 样式补丁
    """

    key: Preset
    name: str
    icon: str
    patch: Mapping[str, Any]


# 默认预设是一次“复位”，不是空补丁
DEFAULT_RESET_PATCH: Mapping[str, Any] = MappingProxyType({
    "img_brightness": 100,
    "img_contrast": 100,
    "img_saturation": 100,
    "vignette_strength": 0.4,
    "show_cinema_bars": False,
    "overlay_opacity": 0.2,
    "gradient_enabled": False,
    "glow_intensity": 3,
    "img_sepia": 0,
    "img_hue_rotate": 0,
    "show_grain": True,
})


def _define(key: Preset, name: str, icon: str, patch: Mapping[str, Any]) -> PresetDefinition:
    return PresetDefinition(key=key, name=name, icon=icon, patch=MappingProxyType(dict(patch)))


PRESETS: Mapping[Preset, PresetDefinition] = MappingProxyType({
    Preset.NONE: _define(Preset.NONE, "Default", "✨", DEFAULT_RESET_PATCH),
    Preset.CINEMATIC: _define(Preset.CINEMATIC, "Cinematic", "🎬", {
        "img_contrast": 120,
        "img_saturation": 90,
        "vignette_strength": 0.6,
        "show_cinema_bars": True,
        "overlay_opacity": 0.3,
    }),
    Preset.NEON: _define(Preset.NEON, "Neon", "💜", {
        "img_saturation": 150,
        "gradient_enabled": True,
        "gradient_color1": "#ff0080",
        "gradient_color2": "#00ffff",
        "gradient_opacity": 0.25,
        "glow_intensity": 5,
    }),
    Preset.VINTAGE: _define(Preset.VINTAGE, "Vintage", "📷", {
        "img_sepia": 30,
        "img_saturation": 80,
        "img_contrast": 110,
        "show_grain": True,
        "vignette_strength": 0.5,
    }),
    Preset.DRAMATIC: _define(Preset.DRAMATIC, "Dramatic", "⚡", {
        "img_contrast": 140,
        "img_brightness": 90,
        "vignette_strength": 0.7,
        "overlay_opacity": 0.25,
    }),
    Preset.COOL: _define(Preset.COOL, "Cool", "❄️", {
        "img_hue_rotate": 180,
        "img_saturation": 90,
        "gradient_enabled": True,
        "gradient_color1": "#0066ff",
        "gradient_color2": "#00ccff",
        "gradient_opacity": 0.2,
    }),
    Preset.WARM: _define(Preset.WARM, "Warm", "🔥", {
        "img_hue_rotate": 20,
        "img_saturation": 120,
        "gradient_enabled": True,
        "gradient_color1": "#ff6600",
        "gradient_color2": "#ffcc00",
        "gradient_opacity": 0.15,
    }),
})


def apply_preset(style: StyleConfig, preset: Preset | str) -> StyleConfig:
    """应用预设，返回新的样式配置.

    Args:
        style: 当前样式
        preset: 预设标识

    Returns:
        应用补丁后的样式

    Raises:
        ValueError: 未知的预设标识
    """
    definition = PRESETS[Preset(preset)]
    return style.apply_patch(definition.patch)


def list_presets() -> list[PresetDefinition]:
    """按展示顺序列出全部预设."""
    return list(PRESETS.values())
