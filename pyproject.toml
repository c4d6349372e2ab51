[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "itemshop"
version = "0.1.0"
description = "Item shop services: env-file configuration, MongoDB seed migrations and per-service HTTP servers with health checks"
requires-python = ">=3.10"
keywords = ["shop", "microservices", "mongodb", "flask", "inventory", "payment"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Framework :: Flask",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: WWW/HTTP :: HTTP Servers",
]
dependencies = [
    "flask",
    "werkzeug",
    "pymongo",
    "python-dotenv",
]

[project.optional-dependencies]
test = [
    "pytest",
    "pytest-mock",
]

[project.scripts]
itemshop = "itemshop.server:main"
itemshop-migrate = "itemshop.migration:main"

[tool.hatch.build.targets.wheel]
packages = ["itemshop"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
ignore_missing_imports = true
