"""标题自适应字号单元测试."""

from __future__ import annotations

import pytest

from thumbnail_studio.core.font_size import length_multiplier, resolve_font_size


class TestLengthMultiplier:
    """字号倍数阶梯测试."""

    @pytest.mark.parametrize(
        "length, expected",
        [
            (0, 1.0),
            (7, 1.0),
            (8, 0.8),
            (14, 0.8),
            (15, 0.6),
            (24, 0.6),
            (25, 0.4),
            (200, 0.4),
        ],
    )
    def test_steps(self, length, expected):
        """测试阶梯边界."""
        assert length_multiplier(length) == expected


class TestResolveFontSize:
    """字号计算测试."""

    def test_short_title(self):
        """测试短标题保持基础字号."""
        assert resolve_font_size("Hi", 120) == 120

    def test_long_title(self):
        """测试 30 个字符的标题."""
        assert resolve_font_size("x" * 30, 120) == pytest.approx(48)

    def test_eight_chars(self):
        """测试正好 8 个字符."""
        assert resolve_font_size("abcdefgh", 100) == pytest.approx(80)

    def test_minimum(self):
        """测试最小字号为 40."""
        assert resolve_font_size("x" * 30, 50) == 40
        assert resolve_font_size("", 10) == 40

    def test_counts_characters_not_width(self):
        """测试只依据字符数."""
        assert resolve_font_size("iiiiiiii", 100) == resolve_font_size("WWWWWWWW", 100)
