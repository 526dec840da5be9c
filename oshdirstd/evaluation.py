"""Rating how well a project listing fits the known directory standards."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Iterable, Optional

from .coverage import Coverage, cover_listing, cover_listing_with
from .stds import Standards, StandardsKind

logger = logging.getLogger(__name__)


class BestFitError(Exception):
    """Raised when no best fitting standard can be chosen."""

    def __init__(self, message: str = "None of the supplied ratings has a factor higher then 0.0"):
        super().__init__(message)


@dataclass(frozen=True)
class Rating:
    """How well a listing fits one standard, from 0.0 (not at all) to 1.0 (fully)."""

    name: str
    factor: float

    @classmethod
    def rate_coverage(cls, coverage: Coverage) -> "Rating":
        """Rate a coverage, counting every unmatched path against it."""
        name = coverage.std.name
        pos_rating = 0.0
        matches_records = False
        for record, paths in coverage.matched.items():
            if paths:
                pos_rating += record.indicativeness
                matches_records = True
        if not matches_records:
            return cls(name, 0.0)

        records = coverage.std.records
        av_ind = sum(rec.indicativeness for rec in records) / len(records)
        neg_rating = len(coverage.out) * av_ind
        logger.debug("ai: %s, nr: %s, pr: %s", av_ind, neg_rating, pos_rating)
        return cls(name, pos_rating / (pos_rating + neg_rating))

    def to_dict(self) -> dict:
        return {"name": self.name, "factor": self.factor}


@dataclass(frozen=True)
class RatingCont:
    """A rating, optionally together with the coverage it was computed from."""

    rating: Rating
    coverage: Optional[Coverage] = None

    def remove_coverage(self) -> "RatingCont":
        """Return the same rating without the coverage."""
        return RatingCont(self.rating, None)

    def to_dict(self) -> dict:
        """Return a JSON-ready representation."""
        return {
            "rating": self.rating.to_dict(),
            "coverage": None if self.coverage is None else self.coverage.to_dict(),
        }


def rate_listing(dirs_and_files: Iterable, ignored_paths: re.Pattern, registry) -> list:
    """Rate the listing against every standard of the registry."""
    return [
        RatingCont(Rating(coverage.std.name, coverage.rate()), coverage)
        for coverage in cover_listing(dirs_and_files, ignored_paths, registry)
    ]


def rate_listing_with(
    dirs_and_files: Iterable, ignored_paths: re.Pattern, registry, std_name: str
) -> RatingCont:
    """Rate the listing against the named standard; unknown names raise KeyError."""
    std = registry.get(std_name)
    coverage = cover_listing_with(dirs_and_files, ignored_paths, std)
    return RatingCont(Rating(std_name, coverage.rate()), coverage)


def best_fit(ratings: Iterable) -> RatingCont:
    """Return the rating with the highest factor; the first one wins ties."""
    max_rating: Optional[RatingCont] = None
    for rating_cont in ratings:
        if max_rating is None or rating_cont.rating.factor > max_rating.rating.factor:
            max_rating = rating_cont
    if max_rating is None:
        raise BestFitError()
    return max_rating


def rate_listing_by_stds(
    dirs_and_files: Iterable, ignored_paths: re.Pattern, stds: Standards, registry
) -> list:
    """Rate the listing against the standard(s) selected by `stds`."""
    kind = stds.kind
    if kind is StandardsKind.DEFAULT:
        return [rate_listing_with(dirs_and_files, ignored_paths, registry, registry.default_name)]
    if kind is StandardsKind.ALL:
        return rate_listing(dirs_and_files, ignored_paths, registry)
    if kind is StandardsKind.BEST_FIT:
        return [best_fit(rate_listing(dirs_and_files, ignored_paths, registry))]
    return [rate_listing_with(dirs_and_files, ignored_paths, registry, stds.name)]


def cover_listing_by_stds(
    dirs_and_files: Iterable, ignored_paths: re.Pattern, stds: Standards, registry
) -> list:
    """Cover the listing with the standard(s) selected by `stds`."""
    kind = stds.kind
    if kind is StandardsKind.DEFAULT:
        std = registry.get(registry.default_name)
        return [cover_listing_with(dirs_and_files, ignored_paths, std)]
    if kind is StandardsKind.ALL:
        return cover_listing(dirs_and_files, ignored_paths, registry)
    if kind is StandardsKind.BEST_FIT:
        coverages = cover_listing(dirs_and_files, ignored_paths, registry)
        best = best_fit(
            RatingCont(Rating.rate_coverage(coverage), coverage) for coverage in coverages
        )
        return [best.coverage]
    std = registry.get(stds.name)
    return [cover_listing_with(dirs_and_files, ignored_paths, std)]