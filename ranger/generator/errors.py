"""Errors raised while generating a project.

Every failure aborts the whole generate operation; callers only ever need to
catch ``RangerError``.
"""


class RangerError(Exception):
    """Base class for all generation failures."""


class ConfigurationError(RangerError):
    """Malformed blueprint, override syntax or user settings."""


class FetchError(RangerError):
    """The template source could not be made available."""


class ResolutionError(RangerError):
    """A template referenced a variable or helper that does not exist."""


class RenderError(RangerError):
    """A template could not be rendered or written."""


class HelperError(RenderError):
    """A blueprint helper command failed to run or exited non-zero."""

    def __init__(self, name: str, detail: str) -> None:
        super().__init__(f"helper '{name}' failed: {detail}")
        self.name = name
        self.detail = detail


class OutputError(RangerError):
    """The output directory could not be prepared."""


class OutputExistsError(OutputError):
    """The output directory already holds files and force was not given."""
