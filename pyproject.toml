[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "morphkit"
version = "1.0.0"
description = "Build tools for inflexion-based morphology dictionaries: table compiler, word trees, binary dumpers and ranking tuners"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "morphology",
    "inflexion",
    "russian",
    "ukrainian",
    "dictionary",
    "compiler",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Natural Language :: Russian",
    "Natural Language :: Ukrainian",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Text Processing :: Linguistic",
    "Topic :: Software Development :: Code Generators",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
morphkit-tfc = "morphkit.tfc:main"
morphkit-tune-ranking = "morphkit.ranking:main"
morphkit-psptable = "morphkit.psptable:main"

[tool.hatch.build.targets.wheel]
packages = ["morphkit"]

[tool.pytest.ini_options]
addopts = "-ra"
