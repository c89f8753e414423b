"""Run asyncio tasks as a directed acyclic graph sharing one key-value context."""

__version__ = "0.1.0"