"""光栅化与导出服务.

把当前合成画面按固定的 1024×576 分辨率重新光栅化并写入 PNG 文件，
与屏幕显示尺寸无关。

导出是一个两状态任务：

- ``IDLE``: 空闲，可以开始导出
- ``EXPORTING``: 导出中，此时的新请求直接忽略

失败时不会留下不完整的文件，也不会修改样式或图片状态。
"""

from __future__ import annotations

import asyncio
import os
import tempfile
import time
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Callable, Optional, Sequence

from PIL import Image

from thumbnail_studio.models.layers import AnyLayer
from thumbnail_studio.services.compositor import Compositor
from thumbnail_studio.utils.color_utils import parse_color
from thumbnail_studio.utils.constants import (
    DEFAULT_EXPORT_DIR,
    EXPORT_BACKGROUND_COLOR,
    EXPORT_FILENAME_PREFIX,
    EXPORT_HEIGHT,
    EXPORT_WIDTH,
)
from thumbnail_studio.utils.exceptions import (
    ExportCaptureError,
    ExportDeliveryError,
    ExportError,
)
from thumbnail_studio.utils.logger import setup_logger

logger = setup_logger(__name__)


def _current_umask() -> int:
    mask = os.umask(0)
    os.umask(mask)
    return mask


# 导出文件使用普通新建文件的权限（mkstemp 默认为 0600）
EXPORT_FILE_MODE = 0o666 & ~_current_umask()


# ===================
# 数据结构
# ===================


class ExportState(str, Enum):
    """导出状态."""

    IDLE = "idle"
    EXPORTING = "exporting"


@dataclass(frozen=True)
class CaptureRequest:
    """光栅化请求.

    Attributes:
        width: 目标宽度（像素）
        height: 目标高度（像素）
        scale: 屏幕像素到输出像素的缩放系数
        background_color: 透明区域的填充色
    """

    width: int
    height: int
    scale: float
    background_color: str = EXPORT_BACKGROUND_COLOR

    @property
    def size(self) -> tuple[int, int]:
        return (self.width, self.height)


@dataclass
class ExportResult:
    """导出结果.

    Attributes:
        path: 写入的文件路径
        filename: 文件名
        image: 光栅化得到的图片
    """

    path: Path
    filename: str
    image: Image.Image = field(repr=False)


def build_capture_request(width_actual: float) -> CaptureRequest:
    """根据屏幕显示宽度构造光栅化请求.

    Args:
        width_actual: 合成画面当前的屏幕宽度（像素）

    Returns:
        固定 1024×576 的请求，scale = 1024 / width_actual

    Raises:
        ExportCaptureError: 显示宽度不是正数
    """
    if width_actual <= 0:
        raise ExportCaptureError(f"画布显示宽度无效: {width_actual}")
    return CaptureRequest(
        width=EXPORT_WIDTH,
        height=EXPORT_HEIGHT,
        scale=EXPORT_WIDTH / width_actual,
    )


# ===================
# 光栅化
# ===================


class Rasterizer:
    """光栅化器.

    以请求的缩放系数重新合成图层，并把结果铺在不透明背景色上。
    """

    def __init__(self, compositor: Optional[Compositor] = None) -> None:
        self.compositor = compositor or Compositor()

    def capture(self, layers: Sequence[AnyLayer], request: CaptureRequest) -> Image.Image:
        """同步光栅化.

        Args:
            layers: 图层描述列表
            request: 光栅化请求

        Returns:
            RGB 模式图片，尺寸为 request.size

        Raises:
            ExportCaptureError: 合成过程出现任何错误
        """
        try:
            composed = self.compositor.compose(layers, request.size, request.scale)
            background = Image.new("RGBA", request.size, parse_color(request.background_color))
            return Image.alpha_composite(background, composed).convert("RGB")
        except ExportError:
            raise
        except Exception as e:
            raise ExportCaptureError(str(e)) from e


# ===================
# 导出器
# ===================


class ThumbnailExporter:
    """缩略图导出器.

    同一时刻只允许一个导出任务；导出中再次触发直接返回 None。

    Example:
        >>> exporter = ThumbnailExporter(export_dir)
        >>> result = await exporter.export(layers, width_actual=960)
    """

    def __init__(
        self,
        export_dir: Path | str = DEFAULT_EXPORT_DIR,
        rasterizer: Optional[Rasterizer] = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """初始化导出器.

        Args:
            export_dir: 导出目录
            rasterizer: 光栅化器
            clock: 返回秒级时间戳的时钟
        """
        self.export_dir = Path(export_dir)
        self.rasterizer = rasterizer or Rasterizer()
        self._clock = clock
        self._state = ExportState.IDLE
        self._last_timestamp = 0

    @property
    def state(self) -> ExportState:
        """当前导出状态."""
        return self._state

    @property
    def is_exporting(self) -> bool:
        return self._state == ExportState.EXPORTING

    def next_filename(self) -> str:
        """生成导出文件名.

        使用毫秒时间戳；同一会话内若时间戳未前进则顺延 1 毫秒，保证不重名。
        """
        timestamp = int(self._clock() * 1000)
        if timestamp <= self._last_timestamp:
            timestamp = self._last_timestamp + 1
        self._last_timestamp = timestamp
        return f"{EXPORT_FILENAME_PREFIX}{timestamp}.png"

    async def export(
        self,
        layers: Sequence[AnyLayer],
        width_actual: float,
    ) -> Optional[ExportResult]:
        """导出当前画面.

        图层列表在触发时即被固定，导出过程中的样式修改不影响本次结果。

        Args:
            layers: 触发时的图层描述列表
            width_actual: 合成画面当前的屏幕宽度（像素）

        Returns:
            ExportResult；导出中重复触发时返回 None

        Raises:
            ExportCaptureError: 光栅化失败
            ExportDeliveryError: 文件写入失败
        """
        if self._state == ExportState.EXPORTING:
            logger.info("导出进行中，忽略本次请求")
            return None

        self._state = ExportState.EXPORTING
        snapshot = list(layers)
        try:
            request = build_capture_request(width_actual)
            logger.info(f"开始导出: 显示宽度={width_actual}, 缩放={request.scale:.3f}")

            loop = asyncio.get_event_loop()
            image = await loop.run_in_executor(None, self.rasterizer.capture, snapshot, request)

            filename = self.next_filename()
            path = await loop.run_in_executor(None, self._deliver, image, filename)

            logger.info(f"导出完成: {path}")
            return ExportResult(path=path, filename=filename, image=image)
        except ExportError as e:
            logger.error(f"导出失败: {e}")
            raise
        finally:
            self._state = ExportState.IDLE

    def _deliver(self, image: Image.Image, filename: str) -> Path:
        """写入导出文件.

        先写入同目录下的临时文件，完成后原子重命名，失败时删除临时文件。

        Raises:
            ExportDeliveryError: 写入失败
        """
        target = self.export_dir / filename
        tmp_path: Optional[str] = None
        try:
            self.export_dir.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(suffix=".png.part", dir=self.export_dir)
            with os.fdopen(fd, "wb") as f:
                image.save(f, format="PNG")
            os.chmod(tmp_path, EXPORT_FILE_MODE)
            os.replace(tmp_path, target)
            tmp_path = None
            return target
        except OSError as e:
            raise ExportDeliveryError(str(target), str(e)) from e
        finally:
            if tmp_path is not None and os.path.exists(tmp_path):
                os.remove(tmp_path)
