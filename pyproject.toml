[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "ultralog"
version = "0.1.0"
description = "Priority-filtered message logger to a file or a TCP client, with a statistics monitor"
requires-python = ">=3.10"
dependencies = []
keywords = ["logging", "logger", "priority", "tcp", "monitor", "statistics"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Logging",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
ultralog = "ultralog.app:main"
ultralog-monitor = "ultralog.monitor.app:main"

[tool.hatch.build.targets.wheel]
packages = ["ultralog"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
