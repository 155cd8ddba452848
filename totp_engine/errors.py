"""
errors.py — Exception hierarchy for the TOTP engine.

Every parameter-validation error is raised synchronously at the call site and
indicates caller misuse; none of them is worth retrying.
A rejected replay is NOT an exception: see ``totp_engine.models.Verdict``.
"""


class OTPError(Exception):
    """Base error of the engine."""
    pass


class InvalidLengthError(OTPError):
    """Requested secret length is below 1 byte."""
    pass


class InvalidEncodingError(OTPError):
    """Base32 text contains characters outside the RFC 4648 alphabet."""
    pass


class InvalidParameterError(OTPError):
    """Bad step size, window, counter, timestamp or empty identifier."""
    pass


class InvalidDigitsError(InvalidParameterError):
    """Digit count outside 6..8."""
    pass


class InvalidSecretError(OTPError):
    """Secret is empty or missing."""
    pass


class NotEnrolledError(InvalidSecretError):
    """No account record has been saved in the store yet."""
    pass


class StorageUnavailableError(OTPError):
    """The persistent store failed (I/O error, corruption)."""
    pass
