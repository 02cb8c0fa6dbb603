[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "gt7link"
version = "0.1.0"
description = "Gran Turismo 7 telemetry parsing and UDP client, with a simulated virtual DualShock 4 controller"
requires-python = ">=3.10"
dependencies = []
keywords = ["gt7", "gran turismo", "telemetry", "udp", "dualshock4", "gamepad"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Framework :: AsyncIO",
    "Operating System :: OS Independent",
    "Topic :: Games/Entertainment :: Simulation",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest", "pytest-asyncio"]

[tool.hatch.build.targets.wheel]
packages = ["gt7link"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
