"""
Exception types for the standards search engine.

Data problems in user input (a malformed registry id, a filter that matches
nothing) are reported as data, not exceptions. The classes here cover caller
programming errors and malformed rows handed over by the record provider.
"""


class StandardsSearchError(Exception):
    """Base class for all errors raised by this package."""


class ConfigurationError(StandardsSearchError, ValueError):
    """
    Invalid caller configuration.

    Raised for thresholds outside [0, 1], unknown sort/search/filter
    fields, unknown sort directions and negative limits.
    """


class RecordError(StandardsSearchError, ValueError):
    """A backend row could not be converted into a Record."""
