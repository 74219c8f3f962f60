"""核心派生逻辑模块.

本模块中的函数都是纯函数：同样的输入总是得到同样的输出。
"""

from thumbnail_studio.core.font_size import resolve_font_size
from thumbnail_studio.core.layer_stack import build_layer_stack
from thumbnail_studio.core.text_styler import build_text_paint

__all__ = ["build_layer_stack", "build_text_paint", "resolve_font_size"]
