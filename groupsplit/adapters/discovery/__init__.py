"""File discovery adapters."""

from .filesystem import FilesystemDiscovery

__all__ = ["FilesystemDiscovery"]
