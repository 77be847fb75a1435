"""Mimir: a memory injection demonstration agent."""

__version__ = "0.1.0"
