"""
Errors raised by seqparse.

Matching, decomposition and sequence insertion never raise for string input,
they return None or False instead. These exceptions cover broken patterns,
renderer contract violations and unreadable directories.
"""

__all__ = [
    'SequenceParsingError',
    'TokenizeError',
    'RenderError',
    'DirectoryUnavailable',
]


class SequenceParsingError(ValueError):
    """Base class for all seqparse errors."""


class TokenizeError(SequenceParsingError):
    """
    Raised when a pattern uses variable syntax that is not supported

    Ex:
        file%0%4d.png       (nested variable)
        file_%02v.png       (padded view variable)
    """

    def __init__(self, pattern, message=None):
        self.pattern = pattern
        if message is None:
            message = "Unsupported variable in pattern: {0}".format(pattern)
        super(TokenizeError, self).__init__(message)


class RenderError(SequenceParsingError):
    """
    Raised when a variable can not be expanded into a filename.
    Only happens if a variable was built outside of the tokenizer.
    """


class DirectoryUnavailable(SequenceParsingError):
    """
    Raised when the folder of a sequence can not be listed
    """

    def __init__(self, path, reason=None):
        self.path = path
        self.reason = reason
        message = "Couldn't list directory: {0}".format(path)
        if reason:
            message += " - {0}".format(reason)
        super(DirectoryUnavailable, self).__init__(message)
