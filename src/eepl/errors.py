"""Base exception shared by the pipeline error taxonomy."""


class PipelineError(Exception):
    """Raised when a pipeline cannot be built or materialized."""

    pass
