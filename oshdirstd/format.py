"""Records and directory standards as defined in standard definition CSV files."""

from __future__ import annotations

import csv
import dataclasses
import enum
import re
from dataclasses import dataclass
from pathlib import Path
from typing import IO, Iterable, Optional

COLUMNS = (
    "Path",
    "Normative",
    "Tracked",
    "Generated",
    "Module",
    "ArbitraryContent",
    "Tags",
    "Indicativeness",
    "Variations",
    "Regex",
    "Description",
    "Sample Content",
)


class ParseError(Exception):
    """Raised when a standard definition cannot be read or parsed."""


class OptBool(enum.Enum):
    """A boolean that may also be unset, as written in the definition CSV."""

    FALSE = "false"
    TRUE = "true"
    NONE = "-"

    @classmethod
    def from_optional(cls, value: Optional[bool]) -> "OptBool":
        if value is None:
            return cls.NONE
        return cls.TRUE if value else cls.FALSE

    def to_optional(self) -> Optional[bool]:
        if self is OptBool.NONE:
            return None
        return self is OptBool.TRUE


@dataclass(frozen=True, eq=False)
class Record:
    """One row of a directory standard definition.

    Records compare and hash by their path alone.
    """

    path: str
    normative: bool
    tracked: bool
    generated: bool
    module: bool
    arbitrary_content: Optional[bool]
    tags: frozenset
    indicativeness: float
    variations: Optional[tuple]
    regex: Optional[re.Pattern]
    description: str
    sample_content: str

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Record):
            return NotImplemented
        return self.path == other.path

    def __hash__(self) -> int:
        return hash(self.path)

    @property
    def directory(self) -> bool:
        return self.path.endswith("/")

    def regex_str(self) -> str:
        """Return the regex for the path part after the ancestor record."""
        if self.variations is not None:
            return "(" + "|".join(self.variations) + ")"
        if self.regex is not None:
            return self.regex.pattern
        raise ValueError("A record needs to have either variations or regex set!")

    def to_dict(self) -> dict:
        """Return the record in the shape of a definition CSV row."""
        return {
            "Path": self.path,
            "Normative": self.normative,
            "Tracked": self.tracked,
            "Generated": self.generated,
            "Module": self.module,
            "ArbitraryContent": OptBool.from_optional(self.arbitrary_content).value,
            "Tags": "|".join(sorted(self.tags)),
            "Indicativeness": self.indicativeness,
            "Variations": None if self.variations is None else "|".join(self.variations),
            "Regex": None if self.regex is None else self.regex.pattern,
            "Description": self.description,
            "Sample Content": self.sample_content,
        }


def _parse_bool(value: str, column: str, line: int) -> bool:
    if value == "true":
        return True
    if value == "false":
        return False
    raise ParseError(f"line {line}: invalid boolean {value!r} in column {column!r}")


def _parse_row(row: dict, line: int) -> Record:
    try:
        arbitrary = OptBool(row["ArbitraryContent"]).to_optional()
    except ValueError as err:
        raise ParseError(
            f"line {line}: invalid value {row['ArbitraryContent']!r} in column 'ArbitraryContent'"
        ) from err
    try:
        indicativeness = float(row["Indicativeness"])
    except ValueError as err:
        raise ParseError(
            f"line {line}: invalid number {row['Indicativeness']!r} in column 'Indicativeness'"
        ) from err
    regex_src = row["Regex"]
    try:
        regex = re.compile(regex_src) if regex_src else None
    except re.error as err:
        raise ParseError(f"line {line}: invalid regex {regex_src!r}: {err}") from err
    variations = row["Variations"]
    return Record(
        path=row["Path"],
        normative=_parse_bool(row["Normative"], "Normative", line),
        tracked=_parse_bool(row["Tracked"], "Tracked", line),
        generated=_parse_bool(row["Generated"], "Generated", line),
        module=_parse_bool(row["Module"], "Module", line),
        arbitrary_content=arbitrary,
        tags=frozenset(row["Tags"].split("|")),
        indicativeness=indicativeness,
        variations=tuple(variations.split("|")) if variations else None,
        regex=regex,
        description=row["Description"],
        sample_content=row["Sample Content"],
    )


def _read_rows(stream: Iterable[str]) -> Iterable[tuple]:
    reader = csv.reader(stream)
    header = None
    for row in reader:
        if not row:
            continue
        if header is None:
            header = row
            missing = [col for col in COLUMNS if col not in header]
            if missing:
                raise ParseError(f"Missing CSV column(s): {', '.join(missing)}")
            continue
        if len(row) != len(header):
            raise ParseError(
                f"line {reader.line_num}: found {len(row)} fields, expected {len(header)}"
            )
        yield reader.line_num, dict(zip(header, row))


@dataclass(frozen=True, eq=False)
class DirStandard:
    """A named directory standard; compares and hashes by name."""

    name: str
    records: tuple

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DirStandard):
            return NotImplemented
        return self.name == other.name

    def __hash__(self) -> int:
        return hash(self.name)

    @classmethod
    def from_csv_stream(cls, name: str, stream: IO[str]) -> "DirStandard":
        """Read a standard from CSV text; indicativeness values are normalised to sum to 1."""
        try:
            raw = [_parse_row(row, line) for line, row in _read_rows(stream)]
        except csv.Error as err:
            raise ParseError(f"Failed to parse CSV: {err}") from err
        total = sum(rec.indicativeness for rec in raw)
        records = tuple(
            dataclasses.replace(
                rec,
                indicativeness=rec.indicativeness / total if total else float("nan"),
            )
            for rec in raw
        )
        return cls(name=name, records=records)

    @classmethod
    def from_csv_file(cls, csv_file) -> "DirStandard":
        """Read a standard from a CSV file, named after the directory holding it."""
        path = Path(csv_file)
        name = path.parent.name
        if not name:
            raise ParseError(f"Failed to extract directory name from CSV path: '{path}'")
        try:
            with path.open(newline="", encoding="utf-8") as stream:
                return cls.from_csv_stream(name, stream)
        except OSError as err:
            raise ParseError(f"Failed to read '{path}': {err}") from err