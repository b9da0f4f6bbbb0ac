"""Shared data type definitions (RelativePath, ResolvedLocation)."""

import os
from stat import S_ISDIR, S_ISREG
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Tuple


class RelativePath(str):
    """
    Canonical path relative to the root directory.

    Segments are joined with os.sep and never empty, "." or "..".
    The empty string denotes the root itself.
    """

    @property
    def segments(self) -> Tuple[str, ...]:
        return tuple(segment for segment in self.split(os.sep) if segment)

    @property
    def is_root(self) -> bool:
        return not self


@dataclass(frozen=True)
class ResolvedLocation:
    """
    A request path after containment checks, with optional metadata.
    """
    absolute_path: str
    relative_path: RelativePath
    stat: Optional[os.stat_result] = None

    @property
    def name(self) -> str:
        return os.path.basename(self.absolute_path)

    @property
    def is_directory(self) -> bool:
        return self.stat is not None and S_ISDIR(self.stat.st_mode)

    @property
    def is_file(self) -> bool:
        return self.stat is not None and S_ISREG(self.stat.st_mode)

    @property
    def size(self) -> Optional[int]:
        if self.stat is None:
            return None
        return self.stat.st_size

    @property
    def modified_at(self) -> Optional[datetime]:
        if self.stat is None:
            return None
        return datetime.fromtimestamp(self.stat.st_mtime)
