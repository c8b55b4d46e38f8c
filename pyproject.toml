[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "barekit"
version = "0.1.0"
description = "Host-side model of a bare-metal RISC-V SDK: targets, timers, entropy, 16550 UART, a C23-style printf and a test-suite menu"
requires-python = ">=3.10"
dependencies = []
keywords = ["riscv", "bare-metal", "printf", "uart", "16550", "timer", "embedded"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Embedded Systems",
]

[project.optional-dependencies]
test = ["pytest", "hypothesis"]

[project.scripts]
barekit-testsuite = "barekit.menu:main"

[tool.hatch.build.targets.wheel]
packages = ["barekit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
