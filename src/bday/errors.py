from __future__ import annotations


class BirthdayError(ValueError):
    pass


class InvalidDateError(BirthdayError):
    pass


class EmptyNameError(BirthdayError):
    pass


class InvalidArgumentError(BirthdayError):
    pass


class UnknownTimezoneError(InvalidArgumentError):
    pass


class InvalidRangeError(BirthdayError):
    pass


class ConfigError(BirthdayError):
    """The birthday file exists but could not be parsed or holds invalid data."""
