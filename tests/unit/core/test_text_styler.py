"""标题绘制样式单元测试."""

from __future__ import annotations

from thumbnail_studio.core.text_styler import build_text_paint


class TestGlow:
    """发光样式测试."""

    def test_flat_fill(self, style):
        """测试无发光、无描边、无 3D 时为纯色填充."""
        paint = build_text_paint(style.apply_patch({"glow_intensity": 0}))
        assert paint.fill == style.text_color
        assert paint.shadows == ()
        assert paint.stroke is None

    def test_three_glow_rings(self, style):
        """测试发光强度 5 的三层阴影."""
        paint = build_text_paint(style.apply_patch({"glow_intensity": 5, "glow_color": "#00ffcc"}))
        assert [s.blur for s in paint.shadows] == [25, 50, 100]
        assert [s.alpha for s in paint.shadows] == [0.8, 0.6, 0.4]
        assert all(s.color == "#00ffcc" for s in paint.shadows)
        assert all(s.offset_x == 0 and s.offset_y == 0 for s in paint.shadows)


class TestExtrusion:
    """3D 挤出样式测试."""

    def test_extrusion_with_glow(self, style):
        """测试 3D 挤出加追加发光项."""
        paint = build_text_paint(style.apply_patch({
            "text_3d_enabled": True,
            "text_3d_depth": 4,
            "text_3d_color": "#112233",
            "glow_intensity": 2,
        }))
        assert len(paint.shadows) == 5
        assert [(s.offset_x, s.offset_y) for s in paint.shadows[:4]] == [(1, 1), (2, 2), (3, 3), (4, 4)]
        assert all(s.blur == 0 and s.color == "#112233" for s in paint.shadows[:4])
        last = paint.shadows[-1]
        assert last.blur == 20
        assert last.alpha == 0.6
        assert last.color == style.glow_color

    def test_extrusion_without_glow(self, style):
        """测试发光强度为 0 时只有挤出阴影."""
        paint = build_text_paint(style.apply_patch({
            "text_3d_enabled": True,
            "text_3d_depth": 2,
            "glow_intensity": 0,
        }))
        assert len(paint.shadows) == 2

    def test_extrusion_replaces_glow(self, style):
        """测试 3D 列表替代普通发光列表."""
        paint = build_text_paint(style.apply_patch({"text_3d_enabled": True, "glow_intensity": 5}))
        assert all(s.alpha != 0.8 for s in paint.shadows)

    def test_zero_depth(self, style):
        """测试深度为 0."""
        paint = build_text_paint(style.apply_patch({
            "text_3d_enabled": True,
            "text_3d_depth": 0,
            "glow_intensity": 0,
        }))
        assert paint.shadows == ()


class TestStroke:
    """描边测试."""

    def test_stroke_independent_of_shadows(self, style):
        """测试描边不影响阴影列表."""
        for patch in (
            {"glow_intensity": 0},
            {"glow_intensity": 4},
            {"text_3d_enabled": True, "glow_intensity": 4},
        ):
            plain = build_text_paint(style.apply_patch(patch))
            stroked = build_text_paint(style.apply_patch({
                **patch,
                "text_stroke_enabled": True,
                "text_stroke_color": "#ff0000",
                "text_stroke_width": 3,
            }))
            assert stroked.shadows == plain.shadows
            assert stroked.stroke is not None
            assert stroked.stroke.color == "#ff0000"
            assert stroked.stroke.width == 3
