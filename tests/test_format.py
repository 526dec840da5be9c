import io

import pytest

from oshdirstd.format import DirStandard, OptBool, ParseError, Record

HEADER = "Path,Normative,Tracked,Generated,Module,ArbitraryContent,Tags,Indicativeness,Variations,Regex,Description,Sample Content\n"
ROWS = (
    "res/,true,true,false,false,-,doc|x,3,,res,Resources,\n"
    "res/img/,false,true,false,false,true,,1,img|images,,Images,a.png\n"
)


def parse(text, name="std"):
    return DirStandard.from_csv_stream(name, io.StringIO(text))


def test_parse_records_in_order():
    std = parse(HEADER + ROWS)
    assert std.name == "std"
    assert [r.path for r in std.records] == ["res/", "res/img/"]
    res, img = std.records
    assert res.normative is True
    assert img.normative is False
    assert res.arbitrary_content is None
    assert img.arbitrary_content is True
    assert res.variations is None
    assert img.variations == ("img", "images")
    assert img.regex is None
    assert res.tags == frozenset({"doc", "x"})
    assert img.sample_content == "a.png"


def test_indicativeness_normalised():
    std = parse(HEADER + ROWS)
    total = sum(r.indicativeness for r in std.records)
    assert total == pytest.approx(1.0)
    assert std.records[0].indicativeness == pytest.approx(3 * std.records[1].indicativeness)


def test_directory_flag():
    std = parse(HEADER + ROWS + "README.md,true,true,false,false,-,,1,,README\\.md,Readme,\n")
    assert [r.directory for r in std.records] == [True, True, False]


def test_regex_str_variations_and_regex():
    res, img = parse(HEADER + ROWS).records
    assert img.regex_str() == "(img|images)"
    assert res.regex_str() == "res"


def test_regex_str_requires_one():
    std = parse(HEADER + "x/,true,true,false,false,-,,1,,,X,\n")
    with pytest.raises(ValueError):
        std.records[0].regex_str()


def test_to_dict_round_trip():
    res, img = parse(HEADER + ROWS).records
    d = img.to_dict()
    assert d["ArbitraryContent"] == "true"
    assert d["Variations"] == "img|images"
    assert d["Sample Content"] == "a.png"
    assert res.to_dict()["ArbitraryContent"] == "-"
    assert res.to_dict()["Regex"] == "res"


def test_opt_bool():
    assert OptBool.from_optional(True) is OptBool.TRUE
    assert OptBool.from_optional(False) is OptBool.FALSE
    assert OptBool.from_optional(None) is OptBool.NONE
    assert OptBool.NONE.value == "-"
    for value in (True, False, None):
        assert OptBool.from_optional(value).to_optional() is value


def test_records_equal_by_path():
    a = parse(HEADER + ROWS).records[0]
    b = parse(HEADER + "res/,false,false,true,true,false,,5,,other,Other,\n").records[0]
    assert a == b
    assert hash(a) == hash(b)
    assert isinstance(b, Record)


def test_bad_bool_raises():
    with pytest.raises(ParseError):
        parse(HEADER + "res/,yes,true,false,false,-,,1,,res,R,\n")


def test_bad_regex_raises():
    with pytest.raises(ParseError):
        parse(HEADER + "res/,true,true,false,false,-,,1,,(res,R,\n")


def test_missing_column_raises():
    with pytest.raises(ParseError):
        parse("Path,Normative\nres/,true\n")


def test_wrong_field_count_raises():
    with pytest.raises(ParseError):
        parse(HEADER + "res/,true,true\n")


def test_empty_input_has_no_records():
    assert parse("").records == ()


def test_from_csv_file_uses_parent_dir_name(tmp_path):
    std_dir = tmp_path / "unixish"
    std_dir.mkdir()
    (std_dir / "definition.csv").write_text(HEADER + ROWS, encoding="utf-8")
    std = DirStandard.from_csv_file(std_dir / "definition.csv")
    assert std.name == "unixish"
    assert len(std.records) == 2


def test_from_csv_file_missing_raises(tmp_path):
    with pytest.raises(ParseError):
        DirStandard.from_csv_file(tmp_path / "nope" / "definition.csv")


def test_standards_equal_by_name():
    assert parse(HEADER + ROWS, "a") == parse(HEADER, "a")
    assert parse(HEADER, "a") != parse(HEADER, "b")