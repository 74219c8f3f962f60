"""面向用户的错误提示.

把内部异常翻译成通知里展示的标题、描述和处理建议。
"""

from __future__ import annotations

import errno
from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional

from thumbnail_studio.utils.exceptions import (
    ConfigError,
    ExportCaptureError,
    ExportDeliveryError,
    ImageCorruptedError,
    ImageNotFoundError,
    ImageProcessError,
    ImageTooLargeError,
    UnsupportedImageFormatError,
    UploadReadError,
)


class ErrorSeverity(str, Enum):
    """错误严重级别."""

    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


@dataclass(frozen=True)
class UserFriendlyError:
    """一条用户可读的错误提示.

    Attributes:
        title: 标题
        message: 发生了什么
        suggestion: 用户可以怎么做
        severity: 严重级别
        details: 原始异常文本，仅调试时附带
    """

    title: str
    message: str
    suggestion: str
    severity: ErrorSeverity = ErrorSeverity.ERROR
    details: Optional[str] = None


_UNKNOWN = UserFriendlyError(
    "未知错误",
    "操作没有完成。",
    "请重试，如果问题持续请查看日志文件。",
)

# 按顺序匹配，子类必须排在父类之前
_BY_EXCEPTION: tuple[tuple[type[Exception], UserFriendlyError], ...] = (
    (
        ImageNotFoundError,
        UserFriendlyError("找不到图片", "所选文件不存在或已被移动。", "请重新选择图片。"),
    ),
    (
        UnsupportedImageFormatError,
        UserFriendlyError("格式不支持", "这种图片格式无法作为背景。", "请使用 JPG、PNG 或 WebP 图片。"),
    ),
    (
        ImageTooLargeError,
        UserFriendlyError(
            "图片过大",
            "图片文件超出了上传大小限制。",
            "请先压缩图片，或换一张较小的图片。",
            ErrorSeverity.WARNING,
        ),
    ),
    (
        ImageCorruptedError,
        UserFriendlyError("图片已损坏", "图片数据无法解码。", "请用其他软件确认文件能否打开，或换一张图片。"),
    ),
    (
        ImageProcessError,
        UserFriendlyError("图片处理失败", "处理背景图片时出错。", "请换一张图片再试。"),
    ),
    (
        UploadReadError,
        UserFriendlyError("上传失败", "图片没有读取成功，当前背景保持不变。", "请确认文件完整后重新上传。"),
    ),
    (
        ExportDeliveryError,
        UserFriendlyError("保存失败", "导出文件无法写入，没有生成任何文件。", "请检查导出目录的写入权限和剩余空间。"),
    ),
    (
        ExportCaptureError,
        UserFriendlyError("导出失败", "生成导出画面时出错，没有生成任何文件。", "请重试；仍然失败时可以关闭部分特效或更换背景图片。"),
    ),
    (
        ConfigError,
        UserFriendlyError("配置错误", "设置中有无效的值。", "请检查环境变量或 .env 文件。"),
    ),
)

_BY_ERRNO = {
    errno.ENOSPC: UserFriendlyError(
        "磁盘空间不足",
        "磁盘已满，文件无法保存。",
        "清理磁盘空间后重试。",
        ErrorSeverity.CRITICAL,
    ),
    errno.EACCES: UserFriendlyError("权限不足", "没有访问该文件或目录的权限。", "请检查文件夹权限。"),
}


def get_user_friendly_error(
    exception: Exception,
    include_details: bool = False,
) -> UserFriendlyError:
    """查找异常对应的用户提示.

    Args:
        exception: 异常对象
        include_details: 是否附带原始异常文本

    Returns:
        UserFriendlyError
    """
    error = _UNKNOWN
    for exc_type, candidate in _BY_EXCEPTION:
        if isinstance(exception, exc_type):
            error = candidate
            break
    else:
        if isinstance(exception, OSError):
            error = _BY_ERRNO.get(exception.errno, _UNKNOWN)

    if include_details:
        error = replace(error, details=str(exception))
    return error

