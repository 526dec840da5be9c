# oshdirstd

Helps humans and machines deal with the *OSH directory standards*:
conventions for how the files and directories of an open source hardware
project are laid out.

Given a listing of the files and directories of a project, `oshdirstd` can

* **rate** how well the project follows each known directory standard
  (a factor from 0.0, not at all, to 1.0, fully), and
* **map** every path of the project to the record of a standard that
  covers it, or report it as uncovered, ignored, arbitrary or generated
  content.

## Installation

```sh
pip install .
```

## Standard definitions

The standards themselves are not part of this package. They are loaded
from a definitions directory laid out like this:

```
<definitions>/
  default_mod.csv          # holds the name of the default standard
  mod/
    <name>/definition.csv  # one directory per standard
```

Each `definition.csv` has the columns `Path`, `Normative`, `Tracked`,
`Generated`, `Module`, `ArbitraryContent`, `Tags`, `Indicativeness`,
`Variations`, `Regex`, `Description` and `Sample Content`. The
indicativeness values of a standard are normalised so that they sum to 1.

## Command line

The `osh-dir-std` command reads a newline-separated listing of paths,
relative to the project root, from a file (`-I FILE`) or from stdin
(no `-I`, or `-I -`). Empty lines and lines starting with `#` are skipped,
and a leading `./` or `.\` is removed from every path. Parent directories
of listed files are added automatically, and every path is handled only
once. The JSON result goes to stdout, or to the output file given as
positional argument.

The definitions directory is given with `--definitions DIR`, or through the
environment variable `OSH_DIR_STD_DEFINITIONS`.

One of these selects the standard(s) to use; they exclude each other:

| Option | Meaning |
|---|---|
| `-s STD`, `--standard STD` | a specific standard, by name |
| `-b`, `--best-fit` | whichever standard fits best |
| `-a`, `--all` | all known standards |

Sub-commands:

* `rate` (alias `r`): rate the listing; `-c`, `--include-coverage` adds the
  full coverage to each rating
* `map` (alias `m`): map the listing onto the standard(s); each entry holds
  the standard's name, the coverage and the matched records

Other options:

* `-i REGEX`, `--ignore-paths-regex REGEX`: paths to ignore
  (by default hidden files and directories, i.e. any path part starting with `.`)
* `-q`, `--quiet`: only warnings and errors are logged
* `-V`, `--version`: print the version and exit (with `-q`, only the version string)

When rating, uncovered paths count against a standard only if they are
existing files, checked relative to the current directory, so run the
command from the project root.

Rate a git repository against all known standards:

```sh
git ls-files --recurse-submodules \
    | osh-dir-std --definitions path/to/osh-dir-std --all rate
```

Map the files of a repository onto the best fitting standard:

```sh
export OSH_DIR_STD_DEFINITIONS=path/to/osh-dir-std
git ls-files --recurse-submodules | osh-dir-std --best-fit map out.json
```

The command exits with status 1 if no sub-command is given, if the
definitions cannot be read, or if reading the listing or writing the
output fails.

## Library

```python
import re

from oshdirstd.data import load_registry
from oshdirstd.evaluation import cover_listing_by_stds, rate_listing
from oshdirstd.stds import Standards

registry = load_registry("path/to/osh-dir-std")
paths = ["README.md", "res", "res/photo.jpg", "src", "src/main.scad"]
ignored = re.compile(r"(^|.*/)(\..+)$")

for rating in rate_listing(paths, ignored, registry):
    print(rating.rating.name, rating.rating.factor)

stds = Standards.from_opts(False, True, None)
(best,) = cover_listing_by_stds(paths, ignored, stds, registry)
print(best.to_dict())
```

The modules:

* `oshdirstd.format`: `Record`, `DirStandard` (with `from_csv_file` and
  `from_csv_stream`), `OptBool` and `ParseError`
* `oshdirstd.data`: `StandardsRegistry`, `load_registry` and
  `DEFAULT_IGNORED_PATHS`
* `oshdirstd.stds`: `Standards`, the selection of default, all, best-fit
  or a specific standard
* `oshdirstd.tree`: `create`, building the records tree of a standard
* `oshdirstd.coverage`: `Checker`, `Coverage`, `cover_listing` and
  `cover_listing_with`
* `oshdirstd.evaluation`: `Rating`, `RatingCont`, `best_fit`,
  `BestFitError`, `rate_listing`, `rate_listing_with`,
  `rate_listing_by_stds` and `cover_listing_by_stds`
* `oshdirstd.cli`: the `osh-dir-std` command (`main`)

## What it does not do

No standard definitions ship with the package; without a definitions
directory the command cannot rate or map anything. It also does not walk
the file system itself: the listing of a project has to be supplied.

## Running the tests

```sh
pip install .[test]
pytest
```