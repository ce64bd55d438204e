[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "prostschema"
version = "0.1.0"
description = "Parse protobuf field attributes into typed message, enumeration and oneof schemas"
requires-python = ">=3.10"
dependencies = []
keywords = ["protobuf", "schema", "attributes", "code generation", "oneof"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Code Generators",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["prostschema"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
