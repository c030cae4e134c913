"""Group file writer adapters."""

from .text_file import TextFileGroupWriter, group_file_path, read_group

__all__ = ["TextFileGroupWriter", "group_file_path", "read_group"]
