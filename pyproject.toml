[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "linkrouter"
version = "0.7.0"
description = "Choose which browser, profile or app opens a link, using configurable rules"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "browser",
    "browser-picker",
    "default-browser",
    "profiles",
    "url-rules",
    "xdg",
    "desktop-entry",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: OS Independent",
    "Operating System :: POSIX :: Linux",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: WWW/HTTP :: Browsers",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["linkrouter"]

[tool.hatch.build.targets.sdist]
include = ["linkrouter", "tests"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
