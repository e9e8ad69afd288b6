[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "chatwire"
version = "0.1.0"
description = "Request and response models, with their JSON wire form, for chat completion, assistant, audio and batch APIs."
requires-python = ">=3.10"
dependencies = []
keywords = ["chat", "completions", "assistants", "audio", "batch", "jsonl", "multipart", "json", "models"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["chatwire"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 110
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
