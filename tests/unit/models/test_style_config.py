"""样式配置单元测试."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from thumbnail_studio.models.style_config import (
    RESET_TRANSFORM_PATCH,
    BadgeLabel,
    StyleConfig,
    TextAlign,
)
from thumbnail_studio.utils.exceptions import ConfigError, UnknownStyleFieldError


# ===================
# 默认值测试
# ===================


class TestStyleConfigDefaults:
    """默认值测试."""

    def test_default_values(self):
        """测试默认值."""
        style = StyleConfig()
        assert style.main_text == "Exclusive"
        assert style.sub_text == "Review 2024"
        assert style.text_position == TextAlign.CENTER
        assert style.active_badge == BadgeLabel.NEW
        assert style.overlay_opacity == 0.2
        assert style.glow_intensity == 3
        assert style.img_contrast == 120
        assert style.img_sepia == 10
        assert style.chromatic_enabled is True
        assert style.chromatic_amount == 3

    def test_field_count(self):
        """测试字段数量."""
        assert len(StyleConfig.field_names()) >= 40

    def test_badge_labels(self):
        """测试徽章标签集合."""
        assert [b.value for b in BadgeLabel] == ["LIVE", "4K", "PRO", "NEW", "HOT", "🔥"]


# ===================
# 不可变与补丁测试
# ===================


class TestStyleConfigPatch:
    """补丁操作测试."""

    def test_frozen(self, style):
        """测试实例不可修改."""
        with pytest.raises(ValidationError):
            style.overlay_opacity = 0.5

    def test_apply_patch_returns_new_instance(self, style):
        """测试补丁返回新实例，原实例不变."""
        patched = style.apply_patch({"overlay_opacity": 0.5, "show_grain": False})
        assert patched.overlay_opacity == 0.5
        assert patched.show_grain is False
        assert style.overlay_opacity == 0.2
        assert style.show_grain is True

    def test_apply_patch_keeps_other_fields(self, style):
        """测试未包含的字段保持不变."""
        patched = style.apply_patch({"img_zoom": 150})
        assert style.diff(patched) == {"img_zoom": 150}

    def test_empty_patch(self, style):
        """测试空补丁."""
        assert style.apply_patch({}) is style

    def test_unknown_field(self, style):
        """测试未知字段."""
        with pytest.raises(UnknownStyleFieldError) as exc_info:
            style.apply_patch({"overlay_opacity": 0.1, "not_a_field": 1})
        assert "not_a_field" in str(exc_info.value)
        assert isinstance(exc_info.value, ConfigError)

    def test_with_value(self, style):
        """测试设置单个字段."""
        updated = style.with_value("main_text", "Hello")
        assert updated.main_text == "Hello"

    def test_out_of_range_values_accepted(self, style):
        """测试越界值不会被拒绝."""
        patched = style.apply_patch({
            "overlay_opacity": -1.5,
            "vignette_strength": 7,
            "img_zoom": 0,
            "img_brightness": 1000,
        })
        assert patched.overlay_opacity == -1.5
        assert patched.img_zoom == 0

    def test_clear_badge(self, style):
        """测试关闭徽章."""
        assert style.with_value("active_badge", None).active_badge is None

    def test_equality(self):
        """测试相同字段值的配置相等."""
        assert StyleConfig() == StyleConfig()
        assert StyleConfig().with_value("img_zoom", 120) != StyleConfig()

    def test_reset_transform_patch(self, style):
        """测试复位变换补丁."""
        moved = style.apply_patch({"img_zoom": 180, "img_rotation": 30, "img_offset_x": 12})
        reset = moved.apply_patch(RESET_TRANSFORM_PATCH)
        assert (reset.img_zoom, reset.img_rotation, reset.img_offset_x, reset.img_offset_y) == (100, 0, 0, 0)
