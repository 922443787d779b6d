"""Annotate source code with a generation service and publish the result."""

__version__ = "0.1.0"
