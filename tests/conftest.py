"""Pytest 配置和共享 fixtures."""

from __future__ import annotations

import io
from pathlib import Path

import pytest
from PIL import Image

from thumbnail_studio.models.app_settings import Settings
from thumbnail_studio.models.image_asset import ImageAsset
from thumbnail_studio.models.style_config import StyleConfig


def make_png_bytes(size: tuple[int, int] = (64, 48), color=(200, 120, 40, 255)) -> bytes:
    """生成 PNG 字节数据（左右两半颜色不同，便于检查几何）."""
    img = Image.new("RGBA", size, color)
    half = Image.new("RGBA", (size[0] // 2, size[1]), (20, 60, 220, 255))
    img.paste(half, (0, 0))
    buffer = io.BytesIO()
    img.save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def style() -> StyleConfig:
    """默认样式配置."""
    return StyleConfig()


@pytest.fixture
def png_bytes() -> bytes:
    """测试图片字节数据."""
    return make_png_bytes()


@pytest.fixture
def image_asset(png_bytes: bytes) -> ImageAsset:
    """测试背景图片资源."""
    return ImageAsset.from_bytes(png_bytes, "image/png", "sample.png")


@pytest.fixture
def sample_image_path(tmp_path: Path, png_bytes: bytes) -> Path:
    """写入磁盘的测试图片."""
    path = tmp_path / "sample.png"
    path.write_bytes(png_bytes)
    return path


@pytest.fixture
def export_dir(tmp_path: Path) -> Path:
    """导出目录."""
    path = tmp_path / "exports"
    path.mkdir()
    return path


@pytest.fixture
def settings(export_dir: Path) -> Settings:
    """测试用应用设置."""
    return Settings(export_dir=export_dir, display_width=320, log_dir=None)


@pytest.fixture
def png_factory():
    """按尺寸生成 PNG 字节数据."""
    return make_png_bytes
