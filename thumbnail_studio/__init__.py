"""缩略图工作室 - 分层合成与定分辨率导出."""

__version__ = "1.0.0"
