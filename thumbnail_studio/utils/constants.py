"""应用常量定义."""

from pathlib import Path

# ===================
# 路径常量
# ===================
# 应用数据目录
APP_DATA_DIR = Path.home() / ".thumbnail-studio"

# 日志目录
LOG_DIR = APP_DATA_DIR / "logs"

# 默认导出目录
DEFAULT_EXPORT_DIR = Path.home() / "Downloads"

# ===================
# 画布与导出
# ===================
# 画布宽高比 16:9
CANVAS_ASPECT_RATIO = (16, 9)

# 默认屏幕显示宽度
DEFAULT_DISPLAY_WIDTH = 960

# 规范导出分辨率
EXPORT_WIDTH = 1024
EXPORT_HEIGHT = 576

# 导出背景色（透明区域填充）
EXPORT_BACKGROUND_COLOR = "#000000"

# 导出文件名前缀
EXPORT_FILENAME_PREFIX = f"Thumbnail_{EXPORT_WIDTH}x{EXPORT_HEIGHT}_"

# ===================
# 上传限制
# ===================
# 支持的图片格式
SUPPORTED_IMAGE_FORMATS = {".jpg", ".jpeg", ".png", ".webp", ".bmp", ".gif"}

# 最大图片文件大小 (50MB)
MAX_IMAGE_FILE_SIZE = 50 * 1024 * 1024

# ===================
# 固定装饰参数
# ===================
# 胶片颗粒
GRAIN_TILE_SIZE = 150
GRAIN_OPACITY = 0.15
GRAIN_SEED = 0x5EED

# 扫描线：透明 2px + 黑色 2px
SCANLINE_GAP = 2
SCANLINE_PERIOD = 4

# 电影黑边高度（画布高度比例）
CINEMA_BAR_RATIO = 0.10

# 暗角渐变色标（半径比例）
VIGNETTE_INNER_STOP = 0.4
VIGNETTE_OUTER_STOP = 1.4

# 漏光
LIGHT_LEAK_TOP_LEFT_BOX = 0.7
LIGHT_LEAK_TOP_LEFT_ALPHA = 0x60 / 255
LIGHT_LEAK_TOP_LEFT_STOP = 0.6
LIGHT_LEAK_TOP_LEFT_OPACITY = 0.6
LIGHT_LEAK_BOTTOM_RIGHT_BOX = 0.6
LIGHT_LEAK_BOTTOM_RIGHT_ALPHA = 0x50 / 255
LIGHT_LEAK_BOTTOM_RIGHT_STOP = 0.7
LIGHT_LEAK_BOTTOM_RIGHT_OPACITY = 0.5

# 玻璃反光
REFLECTION_ANGLE = 45
REFLECTION_ALPHA = 0.05

# 色差
GHOST_OPACITY = 0.5
GHOST_HUE_SHIFT = 120

# 占位背景
PLACEHOLDER_FROM_COLOR = "#111827"
PLACEHOLDER_TO_COLOR = "#000000"
PLACEHOLDER_PATTERN_OPACITY = 0.3
PLACEHOLDER_CELL_SIZE = 32

# ===================
# 内容区排版
# ===================
CONTENT_PADDING = 48
CONTENT_SIDE_INSET = 64
BADGE_GAP = 24
SUBTITLE_GAP = 16
TITLE_LINE_HEIGHT = 1.1
SUBTITLE_LINE_HEIGHT = 1.5
SUBTITLE_LETTER_SPACING = 0.2
SUBTITLE_ALPHA = 0.9 * 0.9

BADGE_FONT_SIZE = 12
BADGE_LINE_HEIGHT = 16
BADGE_PADDING_X = 16
BADGE_PADDING_Y = 6
BADGE_BORDER_WIDTH = 1
BADGE_LETTER_SPACING = 0.1
BADGE_FILL_ALPHA = 0x40 / 255
BADGE_GLOW_BLUR = 20

# ===================
# 标题字号
# ===================
MIN_TITLE_FONT_SIZE = 40
