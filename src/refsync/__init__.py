"""refsync - keep autogenerated markdown link reference definitions in sync."""

__version__ = "0.3.0"
