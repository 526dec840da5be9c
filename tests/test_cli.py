import io
import json

import pytest

from oshdirstd.cli import (
    DEFINITIONS_ENV,
    PROG,
    build_parser,
    cov_entry,
    dirs_and_files,
    line_to_path,
    main,
)
from oshdirstd.coverage import cover_listing_with
from oshdirstd.data import DEFAULT_IGNORED_PATHS, VERSION, load_registry

HEADER = (
    "Path,Normative,Tracked,Generated,Module,ArbitraryContent,Tags,"
    "Indicativeness,Variations,Regex,Description,Sample Content\n"
)
ALPHA = HEADER + (
    "doc/,true,true,false,false,-,docs,1.0,doc|docs,,Documentation,\n"
    "src/,true,true,false,false,-,source,1.0,src,,Sources,\n"
)
BETA = HEADER + "hardware/,true,true,false,false,-,hw,1.0,hardware|hw,,Hardware,\n"


@pytest.fixture
def definitions(tmp_path, monkeypatch):
    monkeypatch.delenv(DEFINITIONS_ENV, raising=False)
    root = tmp_path / "defs"
    (root / "mod" / "alpha").mkdir(parents=True)
    (root / "mod" / "beta").mkdir(parents=True)
    (root / "default_mod.csv").write_text("alpha", encoding="utf-8")
    (root / "mod" / "alpha" / "definition.csv").write_text(ALPHA, encoding="utf-8")
    (root / "mod" / "beta" / "definition.csv").write_text(BETA, encoding="utf-8")
    return root


@pytest.fixture
def listing(tmp_path):
    path = tmp_path / "listing.txt"
    path.write_text("# comment\n./docs/readme.md\nsrc/main.c\n\n.gitignore\n", encoding="utf-8")
    return path


def test_line_to_path_strips_prefixes():
    assert line_to_path("./a/b") == "a/b"
    assert line_to_path(".\\a") == "a"
    assert line_to_path("a/b") == "a/b"


def test_dirs_and_files_adds_ancestors_once():
    lines = ["a/b/c\n", "a/d\n", "# comment\n", "\n", "a/b/c\n"]
    assert list(dirs_and_files(lines)) == ["a/b/c", "a/b", "a", "a/d"]


def test_dirs_and_files_skips_current_dir():
    assert list(dirs_and_files(["./\n", "./x\n"])) == ["x"]


def test_parser_rate_with_standard():
    args = build_parser(["alpha", "beta"]).parse_args(["-s", "alpha", "rate", "-c"])
    assert args.standard == "alpha"
    assert args.subcommand == "rate"
    assert args.include_coverage is True


def test_parser_alias_and_global_after_subcommand():
    args = build_parser(["alpha"]).parse_args(["m", "--all", "out.json"])
    assert args.subcommand == "map"
    assert args.all is True
    assert args.output == "out.json"


def test_parser_rejects_unknown_standard():
    with pytest.raises(SystemExit) as exc:
        build_parser(["alpha"]).parse_args(["-s", "gamma", "map"])
    assert exc.value.code == 2


def test_parser_ignore_regex():
    args = build_parser(["alpha"]).parse_args(["-i", "^src", "map"])
    assert args.ignore_paths.pattern == "^src"
    with pytest.raises(SystemExit):
        build_parser(["alpha"]).parse_args(["-i", "(", "map"])


def test_version(capsys):
    assert main(["-V"]) == 0
    assert capsys.readouterr().out == f"{PROG} {VERSION}\n"
    assert main(["-V", "-q"]) == 0
    assert capsys.readouterr().out == f"{VERSION}\n"


def test_map_to_file(definitions, listing, tmp_path):
    out = tmp_path / "out.json"
    code = main(["--definitions", str(definitions), "-I", str(listing), "-s", "alpha", str(out), "map"])
    assert code == 0
    result = json.loads(out.read_text(encoding="utf-8"))
    assert len(result) == 1
    entry = result[0]
    assert entry["name"] == "alpha"
    assert {rec["Path"] for rec in entry["records"]} == {"doc/", "src/"}
    assert entry["coverage"]["in"] == {"doc/": ["docs"], "src/": ["src"]}
    assert entry["coverage"]["ignored"] == [".gitignore"]
    assert sorted(entry["coverage"]["out"]) == ["docs/readme.md", "src/main.c"]


def test_map_uses_default_standard(definitions, listing, capsys):
    assert main(["--definitions", str(definitions), "-I", str(listing), "map"]) == 0
    result = json.loads(capsys.readouterr().out)
    assert [entry["name"] for entry in result] == ["alpha"]


def test_rate_all_from_stdin(definitions, monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", io.StringIO("hw/board.kicad\nsrc/main.c\n"))
    assert main(["--definitions", str(definitions), "rate", "--all"]) == 0
    result = json.loads(capsys.readouterr().out)
    assert {entry["rating"]["name"] for entry in result} == {"alpha", "beta"}
    assert all(entry["coverage"] is None for entry in result)


def test_rate_include_coverage(definitions, listing, capsys):
    assert main(["--definitions", str(definitions), "-I", str(listing), "-a", "rate", "-c"]) == 0
    result = json.loads(capsys.readouterr().out)
    assert {entry["coverage"]["std"] for entry in result} == {"alpha", "beta"}


def test_rate_best_fit(definitions, listing, capsys):
    assert main(["--definitions", str(definitions), "-I", str(listing), "-b", "rate"]) == 0
    result = json.loads(capsys.readouterr().out)
    assert len(result) == 1
    assert result[0]["rating"]["name"] == "alpha"


def test_conflicting_selection(definitions):
    with pytest.raises(SystemExit) as exc:
        main(["--definitions", str(definitions), "-s", "alpha", "-a", "rate"])
    assert exc.value.code == 2


def test_missing_subcommand(definitions, capsys):
    assert main(["--definitions", str(definitions), "-a"]) == 1
    assert "usage:" in capsys.readouterr().out


def test_missing_definitions(monkeypatch):
    monkeypatch.delenv(DEFINITIONS_ENV, raising=False)
    with pytest.raises(SystemExit) as exc:
        main(["map"])
    assert exc.value.code == 2


def test_missing_listing_file(definitions, tmp_path):
    assert main(["--definitions", str(definitions), "-I", str(tmp_path / "nope.txt"), "map"]) == 1


def test_cov_entry(definitions):
    registry = load_registry(definitions)
    cov = cover_listing_with(["docs", "docs/a.md"], DEFAULT_IGNORED_PATHS, registry.get("alpha"))
    entry = cov_entry(cov)
    assert entry["name"] == "alpha"
    assert [rec["Path"] for rec in entry["records"]] == ["doc/"]
    assert entry["coverage"]["in"] == {"doc/": ["docs"]}
    assert entry["coverage"]["out"] == ["docs/a.md"]