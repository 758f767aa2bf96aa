"""
内置监听器
"""

from assetsync.listeners.progress import ProgressListener

__all__ = ["ProgressListener"]
