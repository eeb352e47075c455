[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "dogdns"
version = "0.2.1"
description = "A command-line DNS client with coloured table, short and JSON output"
requires-python = ">=3.10"
keywords = ["dns", "dig", "nameserver", "resolver", "dns-over-https", "dns-over-tls", "command-line"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: System Administrators",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: Name Service (DNS)",
    "Topic :: System :: Networking",
    "Topic :: Utilities",
]
dependencies = [
    "dnspython>=2.4",
    "httpx>=0.24",
]

[project.optional-dependencies]
test = [
    "pytest>=7.0",
]

[project.scripts]
dog = "dogdns.main:main"

[tool.hatch.build.targets.wheel]
packages = ["dogdns"]

[tool.hatch.build.targets.sdist]
include = ["dogdns", "tests", "pyproject.toml"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
