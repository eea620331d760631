[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "channelsnoop"
version = "1.2.0"
description = "Building blocks for a WeChat Channels download proxy: option parsing, root-certificate and system-proxy management, injected page scripts, console reports and a CSV download log."
requires-python = ">=3.10"
dependencies = [
    "termcolor",
]
keywords = [
    "proxy",
    "wechat",
    "channels",
    "video",
    "certificate",
    "csv",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: MacOS",
    "Operating System :: Microsoft :: Windows",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Natural Language :: Chinese (Simplified)",
    "Topic :: Internet :: Proxy Servers",
    "Topic :: Multimedia :: Video",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["channelsnoop"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
