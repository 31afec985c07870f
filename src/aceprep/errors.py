"""Exception hierarchy shared across the application."""


class AcePrepError(Exception):
    """Base class for every recoverable application error."""


class FormValidationError(AcePrepError):
    """A tool form is missing a required selection."""


class GenerationError(AcePrepError):
    """The generation service failed or returned a non-conforming reply."""


class TemplateNotFoundError(AcePrepError, KeyError):
    """No saved template matches the requested identifier."""

    def __str__(self) -> str:
        return f"No saved template with id {self.args[0]!r}"


class InvalidTransitionError(AcePrepError):
    """A session action was requested from a state that does not allow it."""
