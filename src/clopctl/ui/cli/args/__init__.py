"""Command line argument handling."""

from .options import CLIArgs, OptimiseArgs
from .parser import ArgumentParser

__all__ = ["ArgumentParser", "CLIArgs", "OptimiseArgs"]
