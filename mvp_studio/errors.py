"""Error taxonomy for the prompt pipeline."""


class MVPStudioError(Exception):
    """Base class for all pipeline errors."""


class ConfigurationError(MVPStudioError, ValueError):
    """Invalid wizard input or page list. Fatal; assembly is aborted."""


class GenerationFailure(MVPStudioError):
    """The async generation call failed. The same transition may be retried."""

    retryable = True

    def __init__(self, message: str, cause: BaseException | None = None):
        super().__init__(message)
        self.cause = cause


class ExportFormatError(MVPStudioError, ValueError):
    """Unknown export format tag. No output is produced."""


class TransitionRejected(MVPStudioError):
    """A transition was requested while generation is pending or before a bundle exists."""
