[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "omronfins"
version = "0.1.0"
description = "Client commands for talking to Omron PLCs over the FINS protocol"
requires-python = ">=3.10"
dependencies = []
keywords = ["omron", "fins", "plc", "industrial", "automation"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Manufacturing",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Embedded Systems",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["omronfins"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
