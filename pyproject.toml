[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "asrkit"
version = "0.1.0"
description = "Streaming speech-recognition front-end helpers: UTF-8/UTF-16 utilities, normalisation token reordering, LFR/CMVN features, CIF search and chunk overlap."
requires-python = ">=3.10"
dependencies = ["numpy"]
keywords = ["asr", "speech", "vad", "lfr", "cmvn", "cif", "itn", "streaming"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Multimedia :: Sound/Audio :: Speech",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["asrkit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
