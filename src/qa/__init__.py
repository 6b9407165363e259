"""Quality assurance for assembled road models."""

from .qa_tests import RoadModelQA

__all__ = ["RoadModelQA"]
