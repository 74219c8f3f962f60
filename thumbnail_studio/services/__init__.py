"""渲染与导出服务模块."""

from thumbnail_studio.services.compositor import (
    Compositor,
    canvas_size_for_width,
)
from thumbnail_studio.services.exporter import (
    CaptureRequest,
    ExportResult,
    ExportState,
    Rasterizer,
    ThumbnailExporter,
    build_capture_request,
)
from thumbnail_studio.services.studio import (
    Notification,
    NotificationLevel,
    ThumbnailStudio,
)

__all__ = [
    # 合成
    "Compositor",
    "canvas_size_for_width",
    # 导出
    "CaptureRequest",
    "ExportResult",
    "ExportState",
    "Rasterizer",
    "ThumbnailExporter",
    "build_capture_request",
    # 会话
    "Notification",
    "NotificationLevel",
    "ThumbnailStudio",
]
