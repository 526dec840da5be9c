import pytest

from oshdirstd.stds import Standards, StandardsKind


@pytest.mark.parametrize(
    "all_, best_fit, specific, kind",
    [
        (True, True, "unixish", StandardsKind.ALL),
        (False, True, "unixish", StandardsKind.BEST_FIT),
        (False, False, "unixish", StandardsKind.SPECIFIC),
        (False, False, None, StandardsKind.DEFAULT),
    ],
)
def test_from_opts_precedence(all_, best_fit, specific, kind):
    assert Standards.from_opts(all_, best_fit, specific).kind is kind


def test_specific_keeps_name():
    stds = Standards.from_opts(False, False, "unixish")
    assert stds.name == "unixish"
    assert stds.describe("other") == "unixish"


def test_describe():
    assert Standards().describe("unixish") == "<default>(unixish)"
    assert Standards(StandardsKind.ALL).describe("unixish") == "<all>"
    assert Standards(StandardsKind.BEST_FIT).describe("unixish") == "<best-fit>(...)"


def test_default_is_default_kind():
    assert Standards() == Standards.from_opts(False, False, None)