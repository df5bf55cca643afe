"""
Adapters layer - Sources of space schedule records.
"""

from .json_space_source import CompositeSpaceSource, ConfigSpaceSource, JsonSpaceSource

__all__ = ["CompositeSpaceSource", "ConfigSpaceSource", "JsonSpaceSource"]
