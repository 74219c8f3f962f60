"""颜色工具单元测试."""

from __future__ import annotations

import pytest

from thumbnail_studio.utils.color_utils import (
    FALLBACK_COLOR,
    parse_color,
    to_alpha_byte,
    with_alpha,
)


class TestParseColor:
    """颜色解析测试."""

    @pytest.mark.parametrize(
        "value, expected",
        [
            ("#ffffff", (255, 255, 255, 255)),
            ("#3b82f6", (59, 130, 246, 255)),
            ("#f00", (255, 0, 0, 255)),
            ("#3b82f640", (59, 130, 246, 64)),
            ("black", (0, 0, 0, 255)),
        ],
    )
    def test_valid(self, value, expected):
        """测试合法颜色."""
        assert parse_color(value) == expected

    def test_invalid_falls_back(self):
        """测试无法解析的颜色回退."""
        assert parse_color("not-a-color") == FALLBACK_COLOR


class TestAlpha:
    """透明度工具测试."""

    def test_with_alpha(self):
        """测试按比例设置不透明度."""
        assert with_alpha("#ffffff", 0.5) == (255, 255, 255, 128)
        assert with_alpha("#ffffff80", 0.5) == (255, 255, 255, 64)

    def test_to_alpha_byte_clamps(self):
        """测试越界截断."""
        assert to_alpha_byte(-1) == 0
        assert to_alpha_byte(2) == 255
