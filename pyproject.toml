[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "hsmotion"
version = "0.1.0"
description = "Hierarchical block-matching motion estimation and compensation for raw YUV 4:2:0 video"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "motion estimation",
    "motion compensation",
    "hierarchical search",
    "block matching",
    "yuv",
    "psnr",
    "video",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Education",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Video",
    "Topic :: Scientific/Engineering :: Image Processing",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
hsmotion = "hsmotion.cli:main"
hsmotion-extract = "hsmotion.extract:main"

[tool.hatch.build.targets.wheel]
packages = ["hsmotion"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
