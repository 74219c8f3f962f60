"""背景图片资源模型.

ImageAsset 以 Data URL 字符串引用一张已完整读入内存的用户图片。
新的上传整体替换旧资源，资源之间不保留任何身份关联。
"""

from __future__ import annotations

from pathlib import Path

from PIL import Image
from pydantic import BaseModel, ConfigDict, Field

from thumbnail_studio.utils.constants import MAX_IMAGE_FILE_SIZE
from thumbnail_studio.utils.image_utils import (
    bytes_to_data_url,
    data_url_to_bytes,
    decode_data_url,
    guess_mime_type,
    validate_image_file,
    verify_image_bytes,
)


class ImageAsset(BaseModel):
    """用户上传的背景图片.

    Attributes:
        data_url: base64 编码的 Data URL
        width: 原始宽度
        height: 原始高度
        source_name: 来源文件名（仅用于日志）

    Example:
        >>> asset = ImageAsset.from_file("photo.jpg")
        >>> image = asset.open()
    """

    model_config = ConfigDict(frozen=True)

    data_url: str = Field(description="Data URL")
    width: int = Field(description="原始宽度")
    height: int = Field(description="原始高度")
    source_name: str = Field(default="", description="来源文件名")

    @property
    def size(self) -> tuple[int, int]:
        """原始尺寸."""
        return (self.width, self.height)

    def open(self) -> Image.Image:
        """解码为 RGBA 图片（副本）.

        Raises:
            ImageCorruptedError: 数据无法解码
        """
        return decode_data_url(self.data_url)

    @classmethod
    def from_bytes(
        cls,
        data: bytes,
        mime_type: str = "image/png",
        source_name: str = "",
    ) -> "ImageAsset":
        """从字节数据创建资源.

        Raises:
            ImageCorruptedError: 数据无法解码
        """
        width, height = verify_image_bytes(data, source_name or "<memory>")
        return cls(
            data_url=bytes_to_data_url(data, mime_type),
            width=width,
            height=height,
            source_name=source_name,
        )

    @classmethod
    def from_data_url(cls, data_url: str, source_name: str = "") -> "ImageAsset":
        """从 Data URL 创建资源.

        Raises:
            ImageCorruptedError: Data URL 无效或数据无法解码
        """
        data = data_url_to_bytes(data_url)
        width, height = verify_image_bytes(data, source_name or "data URL")
        return cls(data_url=data_url, width=width, height=height, source_name=source_name)

    @classmethod
    def from_file(
        cls,
        path: Path | str,
        max_size: int = MAX_IMAGE_FILE_SIZE,
    ) -> "ImageAsset":
        """从本地文件读取资源.

        Raises:
            ImageNotFoundError: 文件不存在
            UnsupportedImageFormatError: 不支持的格式
            ImageTooLargeError: 文件过大
            ImageCorruptedError: 文件无法解码
        """
        path = Path(path)
        validate_image_file(path, max_size)
        return cls.from_bytes(path.read_bytes(), guess_mime_type(path), path.name)
