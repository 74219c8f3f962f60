"""数据模型模块."""

from thumbnail_studio.models.image_asset import ImageAsset
from thumbnail_studio.models.presets import PRESETS, Preset, PresetDefinition, apply_preset
from thumbnail_studio.models.style_config import BadgeLabel, StyleConfig, TextAlign

__all__ = [
    "BadgeLabel",
    "ImageAsset",
    "PRESETS",
    "Preset",
    "PresetDefinition",
    "StyleConfig",
    "TextAlign",
    "apply_preset",
]
