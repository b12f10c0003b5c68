[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "minios"
version = "0.1.0"
description = "Sv39 page tables, a shell command parser and small user utilities of a RISC-V teaching operating system"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "operating-system",
    "risc-v",
    "sv39",
    "page-table",
    "elf",
    "shell",
    "grep",
    "malloc",
    "teaching",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Education",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: System :: Operating System",
    "Topic :: Education",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
minios-grep = "minios.grep:main"
minios-wc = "minios.wc:main"

[tool.hatch.build.targets.wheel]
packages = ["minios"]

[tool.pytest.ini_options]
addopts = "-ra"
