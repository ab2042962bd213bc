[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "chesscore"
version = "0.1.0"
description = "Chess position library with bitboards, FEN, Zobrist hashing, move making and static exchange evaluation"
requires-python = ">=3.10"
dependencies = []
keywords = ["chess", "bitboard", "fen", "zobrist", "chess960", "see"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Games/Entertainment :: Board Games",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["chesscore"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
