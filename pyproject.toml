[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "gxtexconv"
version = "0.1.7"
description = "Convert images into GameCube/Wii TPL texture files"
requires-python = ">=3.10"
dependencies = [
    "pillow",
]
keywords = ["gamecube", "wii", "tpl", "texture", "dxt1", "cmpr", "image conversion"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Graphics :: Graphics Conversion",
    "Topic :: Software Development :: Embedded Systems",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
gxtexconv = "gxtexconv.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["gxtexconv"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
