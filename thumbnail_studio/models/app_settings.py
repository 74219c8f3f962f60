"""应用设置模型."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from thumbnail_studio.utils.constants import (
    DEFAULT_DISPLAY_WIDTH,
    DEFAULT_EXPORT_DIR,
    LOG_DIR,
    MAX_IMAGE_FILE_SIZE,
)
from thumbnail_studio.utils.exceptions import ConfigError


class Settings(BaseSettings):
    """应用设置.

    支持从环境变量（前缀 ``THUMBNAIL_STUDIO_``）和 .env 文件加载配置。

    Attributes:
        log_level: 日志级别
        log_dir: 日志目录
        export_dir: 导出目录
        display_width: 默认屏幕预览宽度
        font_dirs: 额外的字体搜索目录
        max_upload_bytes: 上传图片大小上限
    """

    model_config = SettingsConfigDict(
        env_prefix="THUMBNAIL_STUDIO_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    log_level: str = Field(
        default="INFO",
        description="日志级别",
    )

    log_dir: Optional[Path] = Field(
        default=LOG_DIR,
        description="日志目录，为空时不写日志文件",
    )

    export_dir: Path = Field(
        default=DEFAULT_EXPORT_DIR,
        description="导出目录",
    )

    display_width: int = Field(
        default=DEFAULT_DISPLAY_WIDTH,
        ge=1,
        description="默认屏幕预览宽度",
    )

    font_dirs: list[Path] = Field(
        default_factory=list,
        description="额外的字体搜索目录",
    )

    max_upload_bytes: int = Field(
        default=MAX_IMAGE_FILE_SIZE,
        ge=1,
        description="上传图片大小上限（字节）",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """验证日志级别."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper_v = v.upper()
        if upper_v not in valid_levels:
            raise ValueError(f"无效的日志级别: {v}，有效值: {valid_levels}")
        return upper_v

    @field_validator("export_dir")
    @classmethod
    def expand_export_dir(cls, v: Path) -> Path:
        """展开用户目录."""
        return v.expanduser()


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """获取应用设置（进程内缓存）.

    Raises:
        ConfigError: 配置值无效
    """
    try:
        return Settings()
    except ValidationError as e:
        raise ConfigError(f"配置加载失败: {e}") from e
