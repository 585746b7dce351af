"""
Error kinds raised by the saju engine.

All of them are ValueError subclasses, so callers that only know to
catch ValueError for bad input keep working.
"""


class SajuError(ValueError):
    """Base class for every error the engine raises on purpose."""


class InvalidSymbol(SajuError):
    """A stem, branch, pillar or solar-term symbol outside its fixed set."""


class AdapterError(SajuError):
    """The date adapter or lunar lookup could not answer for an input."""


class ConfigurationError(SajuError):
    """A preset, policy or option combination that cannot be applied."""
