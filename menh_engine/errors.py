"""
Exceptions raised by the Menh Scoring Engine
"""


class MenhEngineError(Exception):
    """Base class for engine errors"""


class ConfigError(MenhEngineError):
    """Raised when an analysis configuration is malformed.

    The whole call fails, no partial results are returned.
    """


class ElementTableError(MenhEngineError):
    """Raised when an injected element table is inconsistent"""
