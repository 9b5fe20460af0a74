# pageripper/__init__.py
"""
PageRipper package initializer.
Defines the package version; the console script lives in pageripper.cli.
"""
__version__ = "0.1.0"

__all__ = ["__version__"]
