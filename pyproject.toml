[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "oshdirstd"
version = "0.8.4"
description = "Rates and maps project file listings against the OSH directory standards"
requires-python = ">=3.10"
dependencies = []
keywords = ["norm", "osh", "directory", "structure", "open-source-hardware"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Utilities",
    "Topic :: Text Processing",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
osh-dir-std = "oshdirstd.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["oshdirstd"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
