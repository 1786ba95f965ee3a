"""cvm - Cursor AppImage 本地版本管理器"""

__version__ = "1.2.0"
