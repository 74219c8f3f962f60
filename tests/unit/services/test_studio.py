"""缩略图工作室会话单元测试."""

from __future__ import annotations

import asyncio

import pytest

from thumbnail_studio.models.layers import LayerKind
from thumbnail_studio.models.presets import Preset
from thumbnail_studio.services.exporter import Rasterizer, ThumbnailExporter
from thumbnail_studio.services.studio import Notification, NotificationLevel, ThumbnailStudio
from thumbnail_studio.services.text_renderer import FONT_SEARCH_PATHS
from thumbnail_studio.utils.exceptions import ExportCaptureError, UnknownStyleFieldError


# ===================
# Fixtures
# ===================


class FailingRasterizer(Rasterizer):
    """总是失败的光栅化器."""

    def capture(self, layers, request):
        raise ExportCaptureError("tainted image data")


@pytest.fixture
def notifications() -> list[Notification]:
    """收集到的通知."""
    return []


@pytest.fixture
def studio(settings, notifications) -> ThumbnailStudio:
    """创建会话实例."""
    return ThumbnailStudio(settings=settings, notifier=notifications.append)


# ===================
# 样式测试
# ===================


class TestStudioStyle:
    """样式修改测试."""

    def test_set_value(self, studio):
        """测试修改单个字段."""
        studio.set_value("main_text", "Launch Day")
        assert studio.style.main_text == "Launch Day"

    def test_update_style_unknown_field(self, studio):
        """测试未知字段不修改状态."""
        before = studio.style
        with pytest.raises(UnknownStyleFieldError):
            studio.update_style({"bogus": 1})
        assert studio.style is before

    def test_apply_preset(self, studio):
        """测试应用预设."""
        studio.apply_preset(Preset.DRAMATIC)
        assert studio.style.img_contrast == 140
        studio.apply_preset("none")
        assert studio.style.img_contrast == 100

    def test_reset_transform(self, studio):
        """测试重置背景变换."""
        studio.update_style({"img_zoom": 200, "img_rotation": 45, "img_offset_y": 30})
        studio.reset_transform()
        assert (studio.style.img_zoom, studio.style.img_rotation, studio.style.img_offset_y) == (100, 0, 0)

    def test_layers_follow_style(self, studio):
        """测试图层列表随样式重新计算."""
        assert LayerKind.CINEMA_BARS in [layer.kind for layer in studio.layers()]
        studio.set_value("show_cinema_bars", False)
        assert LayerKind.CINEMA_BARS not in [layer.kind for layer in studio.layers()]

    def test_render_preview(self, studio):
        """测试预览尺寸."""
        assert studio.render_preview().size == (320, 180)
        assert studio.render_preview(480).size == (480, 270)


# ===================
# 上传测试
# ===================


class TestStudioUpload:
    """背景图片上传测试."""

    @pytest.mark.asyncio
    async def test_upload_file(self, studio, sample_image_path):
        """测试上传图片文件."""
        asset = await studio.upload_image(sample_image_path)
        assert asset is not None
        assert studio.image == asset
        assert studio.layers()[1].kind == LayerKind.GHOST

    @pytest.mark.asyncio
    async def test_upload_bytes(self, studio, png_bytes):
        """测试上传内存图片数据."""
        asset = await studio.upload_bytes(png_bytes, "image/png", "clip.png")
        assert studio.image is asset
        assert asset.source_name == "clip.png"

    @pytest.mark.asyncio
    async def test_upload_missing_file_notifies(self, studio, tmp_path, notifications, png_factory):
        """测试读取失败时发送通知，原图片保持不变."""
        await studio.upload_bytes(png_factory(), "image/png", "first.png")
        before = studio.image

        result = await studio.upload_image(tmp_path / "missing.png")

        assert result is None
        assert studio.image is before
        assert len(notifications) == 1
        assert notifications[0].level == NotificationLevel.ERROR

    @pytest.mark.asyncio
    async def test_upload_corrupted_file_notifies(self, studio, tmp_path, notifications):
        """测试损坏的图片文件."""
        path = tmp_path / "broken.png"
        path.write_bytes(b"\x89PNG garbage")

        assert await studio.upload_image(path) is None
        assert studio.image is None
        assert notifications and notifications[0].level == NotificationLevel.ERROR

    @pytest.mark.asyncio
    async def test_last_completed_upload_wins(self, studio, png_factory):
        """测试多个上传时最后完成的生效."""
        small = png_factory((10, 10))
        large = png_factory((40, 20))
        await asyncio.gather(
            studio.upload_bytes(small, "image/png", "small.png"),
            studio.upload_bytes(large, "image/png", "large.png"),
        )
        assert studio.image.source_name in {"small.png", "large.png"}

        await studio.upload_bytes(large, "image/png", "large.png")
        assert studio.image.size == (40, 20)

    @pytest.mark.asyncio
    async def test_remove_image(self, studio, sample_image_path):
        """测试移除背景图片."""
        await studio.upload_image(sample_image_path)
        studio.remove_image()
        assert studio.image is None
        assert studio.layers()[0].is_placeholder


# ===================
# 导出测试
# ===================


class TestStudioExport:
    """导出测试."""

    @pytest.mark.asyncio
    async def test_export_success(self, studio, export_dir, notifications):
        """测试导出成功并发送通知."""
        result = await studio.export()

        assert result is not None
        assert result.path.parent == export_dir
        assert result.image.size == (1024, 576)
        assert notifications[-1].level == NotificationLevel.SUCCESS

    @pytest.mark.asyncio
    async def test_export_failure_keeps_state(self, settings, export_dir, notifications, image_asset):
        """测试导出失败：阻塞通知、状态不变、不产生文件."""
        exporter = ThumbnailExporter(export_dir, rasterizer=FailingRasterizer())
        studio = ThumbnailStudio(settings=settings, exporter=exporter, notifier=notifications.append)
        studio.image = image_asset
        style_before = studio.style

        result = await studio.export(960)

        assert result is None
        assert studio.style is style_before
        assert studio.image is image_asset
        assert list(export_dir.iterdir()) == []
        assert notifications[-1].level == NotificationLevel.ERROR
        assert notifications[-1].blocking is True
        assert studio.export_state.value == "idle"

    @pytest.mark.asyncio
    async def test_export_zero_width(self, studio, export_dir, notifications):
        """测试显示宽度为 0 时导出失败并通知."""
        assert await studio.export(0) is None
        assert notifications[-1].blocking is True
        assert list(export_dir.iterdir()) == []


# ===================
# 字体目录测试
# ===================


class TestStudioFonts:
    """会话字体目录测试."""

    def test_font_dirs_scoped_to_session(self, settings, tmp_path):
        """测试额外字体目录只属于当前会话，不写入全局搜索路径."""
        paths_before = list(FONT_SEARCH_PATHS)
        font_settings = settings.model_copy(update={"font_dirs": [tmp_path]})

        studio = ThumbnailStudio(settings=font_settings)
        other = ThumbnailStudio(settings=settings)

        assert FONT_SEARCH_PATHS == paths_before
        assert studio.compositor.font_dirs == (str(tmp_path),)
        assert studio.exporter.rasterizer.compositor is studio.compositor
        assert other.compositor.font_dirs == ()
