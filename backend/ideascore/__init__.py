"""IdeaScore: startup idea submission and viability scoring API."""

__version__ = "0.1.0"
