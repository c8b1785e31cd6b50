"""Race harvester: recovers race entries from race_id addressed pages."""

__version__ = "1.0.0"
