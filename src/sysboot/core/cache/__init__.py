"""
Cache de arquivos do SysBoot.
"""

from .file_cache import DEFAULT_CACHE_TTL, DEFAULT_MAX_FILES, CachedFile, FileCache

__all__ = ["CachedFile", "DEFAULT_CACHE_TTL", "DEFAULT_MAX_FILES", "FileCache"]
