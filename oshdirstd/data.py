"""Loading of the known directory standards from a definitions directory."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path

from .format import DirStandard, ParseError, Record

DEFAULT_IGNORED_PATHS = re.compile(r"(^|.*/)(\..+)$")

VERSION = "0.8.4"

DEFAULT_NAME_FILE = "default_mod.csv"
STANDARDS_DIR = "mod"
DEFINITION_FILE = "definition.csv"


@dataclass
class StandardsRegistry:
    """All known directory standards, plus the name of the default one."""

    default_name: str
    standards: dict = field(default_factory=dict)

    @classmethod
    def from_directory(cls, root) -> "StandardsRegistry":
        """Load `default_mod.csv` and every `mod/<name>/definition.csv` below root."""
        root = Path(root)
        try:
            default_name = (root / DEFAULT_NAME_FILE).read_text(encoding="utf-8").strip()
            entries = sorted((root / STANDARDS_DIR).iterdir())
        except OSError as err:
            raise ParseError(f"Failed to read standards from '{root}': {err}") from err
        standards = {}
        for entry in entries:
            if not entry.is_dir():
                continue
            std = DirStandard.from_csv_file(entry / DEFINITION_FILE)
            standards[entry.name] = std
        return cls(default_name=default_name, standards=standards)

    def get(self, name: str) -> DirStandard:
        try:
            return self.standards[name]
        except KeyError:
            raise KeyError(f"Unknown directory standard: '{name}'") from None

    def names(self) -> list:
        return sorted(self.standards)

    def find_record(self, std_name: str, record_path: str) -> Record:
        for rec in self.get(std_name).records:
            if rec.path == record_path:
                return rec
        raise LookupError(
            f"Failed to find record with path '{record_path}' in the '{std_name}' dir standard"
        )


def load_registry(root) -> StandardsRegistry:
    """Load the standards registry from a definitions directory."""
    return StandardsRegistry.from_directory(root)