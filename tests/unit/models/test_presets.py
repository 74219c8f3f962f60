"""预设单元测试."""

from __future__ import annotations

import pytest

from thumbnail_studio.models.presets import (
    DEFAULT_RESET_PATCH,
    PRESETS,
    Preset,
    apply_preset,
    list_presets,
)
from thumbnail_studio.models.style_config import StyleConfig


class TestPresetDefinitions:
    """预设定义测试."""

    def test_all_presets_defined(self):
        """测试每个预设标识都有定义."""
        assert set(PRESETS) == set(Preset)

    def test_patch_fields_exist(self):
        """测试补丁字段都是合法样式字段."""
        fields = StyleConfig.field_names()
        for definition in list_presets():
            assert set(definition.patch) <= fields, definition.key

    def test_list_order(self):
        """测试展示顺序."""
        assert [p.key for p in list_presets()][0] == Preset.NONE
        assert len(list_presets()) == 7

    def test_patch_is_read_only(self):
        """测试补丁不可修改."""
        with pytest.raises(TypeError):
            PRESETS[Preset.NEON].patch["glow_intensity"] = 1  # type: ignore[index]


class TestApplyPreset:
    """应用预设测试."""

    def test_default_reset(self):
        """测试默认预设无论之前取值如何都恢复固定值."""
        extreme = StyleConfig().apply_patch({
            "img_brightness": 10,
            "img_contrast": 300,
            "img_saturation": 0,
            "vignette_strength": 1.0,
            "show_cinema_bars": True,
            "overlay_opacity": 0.9,
            "gradient_enabled": True,
            "glow_intensity": 10,
            "img_sepia": 100,
            "img_hue_rotate": 270,
            "show_grain": False,
        })

        reset = apply_preset(extreme, Preset.NONE)

        assert reset.img_brightness == 100
        assert reset.img_contrast == 100
        assert reset.img_saturation == 100
        assert reset.vignette_strength == 0.4
        assert reset.show_cinema_bars is False
        assert reset.overlay_opacity == 0.2
        assert reset.gradient_enabled is False
        assert reset.glow_intensity == 3
        assert reset.img_sepia == 0
        assert reset.img_hue_rotate == 0
        assert reset.show_grain is True

    def test_default_reset_covers_patch(self):
        """测试复位补丁的字段集合."""
        assert len(DEFAULT_RESET_PATCH) == 11

    def test_preset_only_touches_subset(self, style):
        """测试预设只修改补丁中的字段."""
        neon = apply_preset(style.with_value("main_text", "Keep"), Preset.NEON)
        assert neon.main_text == "Keep"
        assert neon.img_saturation == 150
        assert neon.gradient_enabled is True
        assert neon.gradient_color1 == "#ff0080"
        assert neon.gradient_color2 == "#00ffff"
        assert neon.glow_intensity == 5

    def test_apply_by_string(self, style):
        """测试使用字符串标识."""
        cinematic = apply_preset(style, "cinematic")
        assert cinematic.show_cinema_bars is True
        assert cinematic.vignette_strength == 0.6

    def test_unknown_preset(self, style):
        """测试未知预设."""
        with pytest.raises(ValueError):
            apply_preset(style, "sepia-ish")

    def test_presets_are_idempotent(self, style):
        """测试重复应用结果相同."""
        once = apply_preset(style, Preset.VINTAGE)
        assert apply_preset(once, Preset.VINTAGE) == once
