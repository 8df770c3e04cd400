from .insights import InsightsService

__all__ = ["InsightsService"]
