"""自定义异常类."""

from __future__ import annotations


class AppException(Exception):
    """应用基础异常类.

    所有自定义异常都应继承此类。

    Attributes:
        message: 错误消息
        code: 错误代码
    """

    def __init__(self, message: str, code: str = "UNKNOWN") -> None:
        """初始化异常.

        Args:
            message: 错误消息
            code: 错误代码
        """
        self.message = message
        self.code = code
        super().__init__(self.message)

    def __str__(self) -> str:
        """返回异常字符串表示."""
        return f"[{self.code}] {self.message}"


# ===================
# 配置相关异常
# ===================
class ConfigError(AppException):
    """配置错误异常."""

    def __init__(self, message: str) -> None:
        super().__init__(message, "CONFIG_ERROR")


class UnknownStyleFieldError(ConfigError):
    """样式字段不存在异常."""

    def __init__(self, fields: list[str]) -> None:
        self.fields = fields
        super().__init__(f"未知的样式字段: {', '.join(fields)}")


# ===================
# 图片处理相关异常
# ===================
class ImageProcessError(AppException):
    """图片处理错误异常."""

    def __init__(self, message: str) -> None:
        super().__init__(message, "IMAGE_PROCESS_ERROR")


class ImageNotFoundError(ImageProcessError):
    """图片文件未找到异常."""

    def __init__(self, path: str) -> None:
        super().__init__(f"图片文件未找到: {path}")


class UnsupportedImageFormatError(ImageProcessError):
    """不支持的图片格式异常."""

    def __init__(self, format: str) -> None:
        super().__init__(f"不支持的图片格式: {format}")


class ImageTooLargeError(ImageProcessError):
    """图片文件过大异常."""

    def __init__(self, size: int, max_size: int) -> None:
        size_mb = size / (1024 * 1024)
        max_mb = max_size / (1024 * 1024)
        super().__init__(f"图片文件过大 ({size_mb:.1f}MB)，最大允许 {max_mb:.1f}MB")


class ImageCorruptedError(ImageProcessError):
    """图片数据损坏异常."""

    def __init__(self, source: str) -> None:
        super().__init__(f"图片数据损坏或无法解码: {source}")


# ===================
# 上传相关异常
# ===================
class UploadReadError(AppException):
    """上传读取失败异常."""

    def __init__(self, source: str, reason: str = "") -> None:
        self.source = source
        msg = f"读取上传图片失败: {source}"
        if reason:
            msg += f" ({reason})"
        super().__init__(msg, "UPLOAD_READ_ERROR")


# ===================
# 导出相关异常
# ===================
class ExportError(AppException):
    """导出错误异常."""

    def __init__(self, message: str, code: str = "EXPORT_ERROR") -> None:
        super().__init__(message, code)


class ExportCaptureError(ExportError):
    """光栅化捕获失败异常."""

    def __init__(self, reason: str) -> None:
        super().__init__(f"画面捕获失败: {reason}", "EXPORT_CAPTURE_ERROR")


class ExportDeliveryError(ExportError):
    """导出文件写入失败异常."""

    def __init__(self, path: str, reason: str = "") -> None:
        msg = f"导出文件写入失败: {path}"
        if reason:
            msg += f" ({reason})"
        super().__init__(msg, "EXPORT_DELIVERY_ERROR")
