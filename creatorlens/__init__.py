"""CreatorLens: provider routing, cost tracking and content scoring for AI video creation."""

__version__ = "0.1.0"

__all__ = ["__version__"]
