"""Exceptions raised by the analysis engine."""


class AnalysisError(Exception):
    """Base class for errors raised by a competitive analysis run."""


class InsightGenerationError(AnalysisError):
    """The model returned output that could not be turned into insights."""
