"""Build tools for inflexion-based morphology data: table compiler, trees, dumpers and tuners."""

__version__ = "1.0.0"