"""reqsnap core engine: snapshot storage and structural response diffing."""

__version__ = "1.0.0"
