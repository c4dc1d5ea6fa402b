"""Exceptions raised while parsing or formatting target frameworks."""


class FrameworkError(ValueError):
    """Base error for framework parsing and formatting."""

    def __init__(self, message: str, token: str = "") -> None:
        super().__init__(message)
        self.token = token


class MalformedTokenError(FrameworkError):
    """The token does not follow ``<identifier><version>[-<profile>]``."""


class UnknownIdentifierError(FrameworkError):
    """The identifier is not a known framework name or synonym."""


class InvalidVersionFragmentError(FrameworkError):
    """The version portion of a token could not be parsed."""


class InvalidProfileCharactersError(FrameworkError):
    """The profile contains characters outside ``[A-Za-z0-9.+-]``."""


class InvalidPortableFrameworksError(FrameworkError):
    """A portable framework list contains a framework with a profile."""


class UnresolvablePortableProfileError(FrameworkError):
    """A portable profile could not be expanded into its frameworks."""


class NoShortNameMappingError(FrameworkError):
    """No short folder name could be derived for the identifier."""
