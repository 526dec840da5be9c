"""Mapping of project paths onto the records of directory standards."""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath
from typing import Callable, Iterable

from .format import DirStandard, Record
from .tree import create

logger = logging.getLogger(__name__)


@dataclass
class Coverage:
    """Which project paths are covered by what parts of one directory standard."""

    std: DirStandard
    # Viable paths: all minus ignored ones, excluding those inside modules.
    num_paths: int = 0
    matched: dict = field(default_factory=dict)
    ignored: list = field(default_factory=list)
    arbitrary_content: list = field(default_factory=list)
    generated_content: list = field(default_factory=list)
    out: list = field(default_factory=list)
    modules: dict = field(default_factory=dict)

    def rate(self) -> float:
        """Rate how well the listing adheres to the standard, from 0.0 to 1.0."""
        pos_rating = 0.0
        matches_records = False
        for record, paths in self.matched.items():
            if paths:
                pos_rating += record.indicativeness
                matches_records = True
        if not matches_records:
            return 0.0

        records = self.std.records
        av_ind = sum(rec.indicativeness for rec in records) / len(records)
        num_out_files = sum(1 for path in self.out if Path(path).is_file())
        neg_rating = num_out_files * av_ind

        total_rating = pos_rating + neg_rating
        main_rating = pos_rating / total_rating if total_rating > 0.0 else pos_rating

        parts = [(self.num_paths, main_rating)]
        parts.extend((mod.num_paths, mod.rate()) for mod in self.modules.values())
        num_combined = sum(num for num, _ in parts)
        if num_combined == 0:
            return float("nan")
        return sum(rating * (num / num_combined) for num, rating in parts)

    def module_dirs(self) -> list:
        """Return the paths matched by module records."""
        return [path for record, paths in self.matched.items() if record.module for path in paths]

    def to_dict(self) -> dict:
        """Return a JSON-ready representation."""

        def strs(paths):
            return [os.fspath(path) for path in paths]

        return {
            "std": self.std.name,
            "num_paths": self.num_paths,
            "in": {record.path: strs(paths) for record, paths in self.matched.items()},
            "ignored": strs(self.ignored),
            "arbitrary_content": strs(self.arbitrary_content),
            "generated_content": strs(self.generated_content),
            "out": strs(self.out),
            "modules": {
                os.fspath(mod_path): mod.to_dict() for mod_path, mod in self.modules.items()
            },
        }


def _compile(pattern: str, what: str) -> re.Pattern:
    try:
        return re.compile(pattern)
    except re.error as err:
        raise ValueError(f"Bad (assembled) {what} regex '{pattern}'") from err


def _content_rgxs(rec_nodes, wanted: Callable[[Record], bool], what: str) -> list:
    rgxs = []
    for node in rec_nodes:
        rec = node.value
        if rec is None or node.path_regex is None or not wanted(rec):
            continue
        if rec.directory:
            # squeeze in before the final "$"
            rgxs.append(_compile(node.path_regex.pattern[:-1] + "/.*$", what))
        else:
            rgxs.append(node.path_regex)
    return rgxs


def _module_rgxs(rec_nodes) -> list:
    rgxs = {}
    for node in rec_nodes:
        rec = node.value
        if rec is None or node.path_regex is None or not rec.module:
            continue
        if rec.directory:
            # replace the final "$" with a "/"
            rgx = _compile(node.path_regex.pattern[:-1] + "/", "module dir")
        else:
            rgx = node.path_regex
        logger.debug("module regex: %s", rgx.pattern)
        rgxs.setdefault(rgx.pattern, rgx)
    return list(rgxs.values())


class Checker:
    """Accumulates the coverage of one standard, path by path."""

    def __init__(self, std: DirStandard, ignored_paths: re.Pattern) -> None:
        self._coverage = Coverage(std)
        self._ignored_paths = ignored_paths
        _root, self._rec_nodes = create(std)
        self._module_rgxs = _module_rgxs(self._rec_nodes)
        self._arbitrary_rgxs = _content_rgxs(
            self._rec_nodes, lambda rec: rec.arbitrary_content is True, "arbitrary content dir"
        )
        self._generated_rgxs = _content_rgxs(
            self._rec_nodes, lambda rec: rec.generated, "generated content dir"
        )
        self._modules: dict = {}

    @classmethod
    def new_all(cls, registry, ignored_paths: re.Pattern) -> list:
        """Create one checker for each standard in the registry."""
        return [cls(registry.get(name), ignored_paths) for name in registry.names()]

    def cover(self, dir_or_file) -> None:
        """Record where in the standard the given relative path belongs."""
        path_str = os.fspath(dir_or_file)

        for mod_rgx in self._module_rgxs:
            mtch = mod_rgx.search(path_str)
            if mtch is not None:
                mod_dir = str(PurePosixPath(mtch.group(0)))
                sub_path = mod_rgx.sub("", path_str, count=1)
                logger.debug("module related path: %s (module %s)", path_str, mod_dir)
                checker = self._modules.get(mod_dir)
                if checker is None:
                    checker = Checker(self._coverage.std, self._ignored_paths)
                    self._modules[mod_dir] = checker
                checker.cover(sub_path)
                return

        cov = self._coverage
        if self._ignored_paths.search(path_str):
            cov.ignored.append(dir_or_file)
            return
        cov.num_paths += 1

        matching = False
        for node in self._rec_nodes:
            if node.path_regex is not None and node.path_regex.search(path_str):
                matching = True
                cov.matched.setdefault(node.value, []).append(dir_or_file)

        if not matching and any(rgx.search(path_str) for rgx in self._arbitrary_rgxs):
            matching = True
            cov.arbitrary_content.append(dir_or_file)

        if any(rgx.search(path_str) for rgx in self._generated_rgxs):
            matching = True
            cov.generated_content.append(dir_or_file)

        if not matching:
            cov.out.append(dir_or_file)

    def coverage(self) -> Coverage:
        """Return the accumulated coverage, including that of all modules."""
        self._coverage.modules = {
            mod_path: checker.coverage() for mod_path, checker in self._modules.items()
        }
        return self._coverage


def cover_listing(dirs_and_files: Iterable, ignored_paths: re.Pattern, registry) -> list:
    """Cover the listing with every standard of the registry."""
    checkers = Checker.new_all(registry, ignored_paths)
    for dir_or_file in dirs_and_files:
        for checker in checkers:
            checker.cover(dir_or_file)
    return [checker.coverage() for checker in checkers]


def cover_listing_with(
    dirs_and_files: Iterable, ignored_paths: re.Pattern, std: DirStandard
) -> Coverage:
    """Cover the listing with one given standard."""
    checker = Checker(std, ignored_paths)
    for dir_or_file in dirs_and_files:
        checker.cover(dir_or_file)
    return checker.coverage()