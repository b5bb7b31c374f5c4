[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "sockbook"
version = "0.1.0"
description = "Small TCP servers, clients and timer containers showing classic socket programming patterns"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "sockets",
    "networking",
    "tcp",
    "epoll",
    "select",
    "timers",
    "http",
    "out-of-band",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: Education",
    "Operating System :: POSIX :: Linux",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Networking",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
sockbook-http = "sockbook.http_request:main"
sockbook-byteorder = "sockbook.byteorder:main"
sockbook-connect = "sockbook.connect:main"
sockbook-client = "sockbook.clients:main"
sockbook-basic-server = "sockbook.basic_servers:main"
sockbook-multiplex = "sockbook.multiplex:main"
sockbook-signal-server = "sockbook.signal_server:main"

[tool.hatch.build.targets.wheel]
packages = ["sockbook"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 88
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
