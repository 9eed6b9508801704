"""
jsx-i18n - Automatic text extraction and key management for JSX/TSX components.
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("jsx-i18n-extractor")
except PackageNotFoundError:
    __version__ = "0.0.0"

__all__ = ["__version__"]
