[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "kcomprs"
version = "0.2.0"
description = "Reduce the number of colors used in an image using k-means clustering"
requires-python = ">=3.10"
keywords = ["image-processing", "k-means", "color-quantization"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Graphics :: Graphics Conversion",
]
dependencies = [
    "pillow",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
kcomprs = "kcomprs.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["kcomprs"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
