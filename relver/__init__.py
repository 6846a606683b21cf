"""Branch-constrained release versioning for a single package."""

__version__ = "0.1.0"
