"""Selection of which directory standard(s) to check against."""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Optional

logger = logging.getLogger(__name__)


class StandardsKind(enum.Enum):
    DEFAULT = "default"
    ALL = "all"
    BEST_FIT = "best-fit"
    SPECIFIC = "specific"


@dataclass(frozen=True)
class Standards:
    """Which standards to use; `name` is set only for a specific standard."""

    kind: StandardsKind = StandardsKind.DEFAULT
    name: Optional[str] = None

    @classmethod
    def from_opts(cls, all: bool, best_fit: bool, specific: Optional[str]) -> "Standards":
        if all:
            stds = cls(StandardsKind.ALL)
        elif best_fit:
            stds = cls(StandardsKind.BEST_FIT)
        elif specific is not None:
            stds = cls(StandardsKind.SPECIFIC, specific)
        else:
            stds = cls(StandardsKind.DEFAULT)
        logger.info("Using standard(s): %s", stds.name or stds.kind.value)
        return stds

    def describe(self, default_name: str) -> str:
        if self.kind is StandardsKind.DEFAULT:
            return f"<default>({default_name})"
        if self.kind is StandardsKind.ALL:
            return "<all>"
        if self.kind is StandardsKind.BEST_FIT:
            return "<best-fit>(...)"
        return str(self.name)