"""Command line client for a local batch optimisation service."""

__version__ = "0.1.0"
