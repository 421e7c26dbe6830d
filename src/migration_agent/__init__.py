"""Migration Pathways Agent - A2A-style task service for relocation advice."""

__version__ = "2.0.0"
