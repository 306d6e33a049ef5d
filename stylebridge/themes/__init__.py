"""
Theme files.

Theme definitions can be kept as YAML files on disk and hot-reloaded into a
ThemeRegistry without restarting the host.
"""

from .loader import ThemeLoader

__all__ = ["ThemeLoader"]
