"""图片工具函数模块.

提供图片校验、Data URL 编解码、尺寸适配等工具函数。
"""

from __future__ import annotations

import base64
import binascii
import io
import mimetypes
from functools import lru_cache
from pathlib import Path

from PIL import Image, ImageOps

from thumbnail_studio.utils.constants import (
    MAX_IMAGE_FILE_SIZE,
    SUPPORTED_IMAGE_FORMATS,
)
from thumbnail_studio.utils.exceptions import (
    ImageCorruptedError,
    ImageNotFoundError,
    ImageTooLargeError,
    UnsupportedImageFormatError,
)
from thumbnail_studio.utils.logger import setup_logger

logger = setup_logger(__name__)

DATA_URL_PREFIX = "data:"


def get_file_extension(path: Path | str) -> str:
    """获取文件扩展名（小写）."""
    return Path(path).suffix.lower()


def validate_image_file(path: Path | str, max_size: int = MAX_IMAGE_FILE_SIZE) -> None:
    """验证图片文件.

    Args:
        path: 图片文件路径
        max_size: 最大文件大小（字节）

    Raises:
        ImageNotFoundError: 文件不存在
        UnsupportedImageFormatError: 不支持的格式
        ImageTooLargeError: 文件过大
    """
    path = Path(path)

    if not path.is_file():
        raise ImageNotFoundError(str(path))

    ext = get_file_extension(path)
    if ext not in SUPPORTED_IMAGE_FORMATS:
        raise UnsupportedImageFormatError(ext)

    size = path.stat().st_size
    if size > max_size:
        raise ImageTooLargeError(size, max_size)


def guess_mime_type(path: Path | str) -> str:
    """根据扩展名推断 MIME 类型."""
    mime, _ = mimetypes.guess_type(str(path))
    return mime or "application/octet-stream"


def bytes_to_data_url(data: bytes, mime_type: str) -> str:
    """字节数据编码为 Data URL.

    Args:
        data: 图片字节数据
        mime_type: MIME 类型

    Returns:
        形如 ``data:image/png;base64,...`` 的字符串
    """
    encoded = base64.b64encode(data).decode("ascii")
    return f"{DATA_URL_PREFIX}{mime_type};base64,{encoded}"


def data_url_to_bytes(data_url: str) -> bytes:
    """Data URL 解码为字节数据.

    Raises:
        ImageCorruptedError: 不是合法的 base64 Data URL
    """
    if not data_url.startswith(DATA_URL_PREFIX) or "," not in data_url:
        raise ImageCorruptedError("data URL 格式无效")

    header, payload = data_url.split(",", 1)
    if not header.endswith(";base64"):
        raise ImageCorruptedError("data URL 未使用 base64 编码")

    try:
        return base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError):
        raise ImageCorruptedError("base64 数据无效")


def verify_image_bytes(data: bytes, source: str = "<memory>") -> tuple[int, int]:
    """校验字节数据可以被解码为图片.

    Returns:
        图片按 EXIF 方向校正后的尺寸 (width, height)

    Raises:
        ImageCorruptedError: 数据无法解码
    """
    try:
        with Image.open(io.BytesIO(data)) as img:
            img.load()
            return ImageOps.exif_transpose(img).size
    except Exception as e:
        logger.error(f"图片解码失败: {source}, {e}")
        raise ImageCorruptedError(source)


@lru_cache(maxsize=4)
def _decode_cached(data_url: str) -> Image.Image:
    data = data_url_to_bytes(data_url)
    try:
        img = Image.open(io.BytesIO(data))
        img.load()
        img = ImageOps.exif_transpose(img)
    except Exception as e:
        logger.error(f"图片解码失败: {e}")
        raise ImageCorruptedError("data URL")
    return ensure_rgba(img)


def decode_data_url(data_url: str) -> Image.Image:
    """解码 Data URL 为 RGBA 图片.

    图片按 EXIF 方向信息转正。解码结果按 Data URL 缓存，返回副本，调用方可以自由修改。

    Raises:
        ImageCorruptedError: 数据无法解码
    """
    return _decode_cached(data_url).copy()


def ensure_rgba(image: Image.Image) -> Image.Image:
    """确保图片为 RGBA 模式."""
    if image.mode == "RGBA":
        return image
    return image.convert("RGBA")


def fit_cover(image: Image.Image, target_size: tuple[int, int]) -> Image.Image:
    """按覆盖模式缩放图片：保持比例填满目标区域，居中裁剪.

    Args:
        image: 原图片
        target_size: 目标尺寸

    Returns:
        调整后的图片
    """
    target_w, target_h = target_size
    img_w, img_h = image.size
    img_ratio = img_w / img_h
    target_ratio = target_w / target_h

    if img_ratio > target_ratio:
        new_h = target_h
        new_w = max(target_w, round(new_h * img_ratio))
    else:
        new_w = target_w
        new_h = max(target_h, round(new_w / img_ratio))

    resized = image.resize((new_w, new_h), Image.Resampling.LANCZOS)

    # 居中裁剪
    x = (new_w - target_w) // 2
    y = (new_h - target_h) // 2
    return resized.crop((x, y, x + target_w, y + target_h))


def transparent_canvas(size: tuple[int, int]) -> Image.Image:
    """创建全透明 RGBA 画布."""
    return Image.new("RGBA", size, (0, 0, 0, 0))
