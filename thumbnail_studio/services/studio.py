"""缩略图工作室会话.

持有当前样式配置、背景图片和导出器，是编辑界面与渲染核心之间的唯一入口。

Features:
    - 按字段修改样式、批量补丁、应用预设、重置变换
    - 上传/移除背景图片（异步读取，后完成者生效）
    - 屏幕预览渲染
    - 固定分辨率导出（同一时刻只允许一个导出任务）
    - 失败时通过通知回调告知用户，状态保持不变
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Mapping, Optional

from PIL import Image

from thumbnail_studio.core.layer_stack import build_layer_stack
from thumbnail_studio.models.app_settings import Settings, get_settings
from thumbnail_studio.models.image_asset import ImageAsset
from thumbnail_studio.models.layers import AnyLayer
from thumbnail_studio.models.presets import Preset, apply_preset
from thumbnail_studio.models.style_config import RESET_TRANSFORM_PATCH, StyleConfig
from thumbnail_studio.services.compositor import Compositor, canvas_size_for_width
from thumbnail_studio.services.exporter import (
    ExportResult,
    ExportState,
    Rasterizer,
    ThumbnailExporter,
)
from thumbnail_studio.utils.error_messages import ErrorSeverity, get_user_friendly_error
from thumbnail_studio.utils.exceptions import AppException, ExportError, UploadReadError
from thumbnail_studio.utils.logger import configure_logging, setup_logger

logger = setup_logger(__name__)


# ===================
# 通知
# ===================


class NotificationLevel(str, Enum):
    """通知类型."""

    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"
    INFO = "info"


@dataclass(frozen=True)
class Notification:
    """面向用户的通知.

    Attributes:
        level: 通知类型
        title: 标题
        message: 正文
        blocking: 是否需要用户确认后才消失
    """

    level: NotificationLevel
    title: str
    message: str
    blocking: bool = False

    @classmethod
    def from_exception(cls, exc: Exception, blocking: bool = False) -> "Notification":
        """由异常生成错误通知."""
        error = get_user_friendly_error(exc)
        level = (
            NotificationLevel.WARNING
            if error.severity == ErrorSeverity.WARNING
            else NotificationLevel.ERROR
        )
        return cls(
            level=level,
            title=error.title,
            message=f"{error.message} {error.suggestion}",
            blocking=blocking,
        )


Notifier = Callable[[Notification], None]


# ===================
# 会话
# ===================


class ThumbnailStudio:
    """缩略图工作室.

    Example:
        >>> studio = ThumbnailStudio()
        >>> studio.apply_preset("cinematic")
        >>> await studio.upload_image("photo.jpg")
        >>> result = await studio.export(display_width=960)
    """

    def __init__(
        self,
        style: Optional[StyleConfig] = None,
        settings: Optional[Settings] = None,
        exporter: Optional[ThumbnailExporter] = None,
        notifier: Optional[Notifier] = None,
    ) -> None:
        """初始化会话.

        Args:
            style: 初始样式，默认使用全部默认值
            settings: 应用设置，默认从环境加载
            exporter: 导出器，默认写入设置中的导出目录
            notifier: 通知回调
        """
        self.settings = settings or get_settings()
        self.style = style or StyleConfig()
        self.image: Optional[ImageAsset] = None
        self.compositor = Compositor(self.settings.font_dirs)
        self.exporter = exporter or ThumbnailExporter(
            self.settings.export_dir,
            rasterizer=Rasterizer(self.compositor),
        )
        self._notifier = notifier

        configure_logging(self.settings.log_level, self.settings.log_dir)

    # ---------- 通知 ----------

    def notify(self, notification: Notification) -> None:
        """发送通知（未设置回调时仅记录日志）."""
        logger.info(f"通知[{notification.level.value}]: {notification.title}")
        if self._notifier is not None:
            self._notifier(notification)

    # ---------- 样式 ----------

    def set_value(self, name: str, value: Any) -> StyleConfig:
        """修改单个样式字段.

        Raises:
            UnknownStyleFieldError: 字段名不存在
        """
        self.style = self.style.with_value(name, value)
        return self.style

    def update_style(self, patch: Mapping[str, Any]) -> StyleConfig:
        """批量修改样式字段（未包含的字段保持不变）.

        Raises:
            UnknownStyleFieldError: 补丁包含未知字段
        """
        self.style = self.style.apply_patch(patch)
        return self.style

    def apply_preset(self, preset: Preset | str) -> StyleConfig:
        """应用预设.

        Raises:
            ValueError: 未知的预设标识
        """
        self.style = apply_preset(self.style, preset)
        logger.info(f"应用预设: {Preset(preset).value}")
        return self.style

    def reset_transform(self) -> StyleConfig:
        """重置背景图片的缩放、旋转和位移."""
        return self.update_style(RESET_TRANSFORM_PATCH)

    # ---------- 背景图片 ----------

    async def upload_image(self, path: Path | str) -> Optional[ImageAsset]:
        """异步读取本地图片作为背景.

        多个上传同时进行时，最后完成读取的一个生效。

        Args:
            path: 图片路径

        Returns:
            新的图片资源；读取失败时返回 None，原图片保持不变
        """
        loop = asyncio.get_event_loop()
        try:
            asset = await loop.run_in_executor(
                None, ImageAsset.from_file, path, self.settings.max_upload_bytes
            )
        except AppException as e:
            return self._upload_failed(str(path), e)
        except OSError as e:
            return self._upload_failed(str(path), UploadReadError(str(path), str(e)))

        self.image = asset
        logger.info(f"背景图片已更新: {asset.source_name} {asset.width}x{asset.height}")
        return asset

    async def upload_bytes(
        self,
        data: bytes,
        mime_type: str = "image/png",
        source_name: str = "",
    ) -> Optional[ImageAsset]:
        """异步使用内存中的图片数据作为背景."""
        loop = asyncio.get_event_loop()
        try:
            asset = await loop.run_in_executor(
                None, ImageAsset.from_bytes, data, mime_type, source_name
            )
        except AppException as e:
            return self._upload_failed(source_name or "<memory>", e)

        self.image = asset
        logger.info(f"背景图片已更新: {source_name or '<memory>'} {asset.width}x{asset.height}")
        return asset

    def _upload_failed(self, source: str, error: AppException) -> None:
        logger.error(f"上传失败: {source}, {error}")
        self.notify(Notification.from_exception(error))
        return None

    def remove_image(self) -> None:
        """移除背景图片，恢复占位图案."""
        self.image = None
        logger.info("背景图片已移除")

    # ---------- 渲染与导出 ----------

    def layers(self) -> list[AnyLayer]:
        """当前状态的图层描述列表."""
        return build_layer_stack(self.style, self.image)

    def render_preview(self, display_width: Optional[int] = None) -> Image.Image:
        """按屏幕尺寸渲染预览.

        Args:
            display_width: 预览宽度，默认使用设置值

        Returns:
            16:9 的 RGBA 图片
        """
        width = display_width or self.settings.display_width
        return self.compositor.compose(self.layers(), canvas_size_for_width(width))

    @property
    def export_state(self) -> ExportState:
        return self.exporter.state

    async def export(self, display_width: Optional[float] = None) -> Optional[ExportResult]:
        """导出 1024×576 PNG.

        图层在调用时固定；导出中再次调用直接返回 None。失败时发送阻塞通知，
        样式和图片保持不变。

        Args:
            display_width: 画布当前的屏幕宽度，默认使用设置值

        Returns:
            ExportResult；忽略或失败时返回 None
        """
        width = self.settings.display_width if display_width is None else display_width
        try:
            result = await self.exporter.export(self.layers(), width)
        except ExportError as e:
            self.notify(Notification.from_exception(e, blocking=True))
            return None

        if result is not None:
            self.notify(
                Notification(
                    level=NotificationLevel.SUCCESS,
                    title="导出成功",
                    message=f"已保存到 {result.path}",
                )
            )
        return result
