"""Custom exceptions for lyricseg."""


class LyricsegError(Exception):
    """Base exception for lyricseg."""
    pass


class InvalidSpanError(LyricsegError, ValueError):
    """A span violates the timing or text preconditions of the engine."""
    pass


class RuleConfigError(LyricsegError, ValueError):
    """A rule table could not be parsed."""
    pass
