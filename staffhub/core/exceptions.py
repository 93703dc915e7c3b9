class DomainError(Exception):
    """Base exception for engine and workflow rule violations."""


class InputError(DomainError):
    """Raised for structurally invalid input: missing actor, unparsable date, bad year."""


class InvalidRange(InputError):
    """Raised when a leave request ends before it starts."""


class ConfigurationError(DomainError):
    """A role or jurisdiction has no table entry.

    The permission resolver never raises this; it logs it and carries on.
    """


class AuthorizationDenied(DomainError):
    """Raised when no visibility policy or guard grants the actor access."""


class LeaveRuleViolation(DomainError):
    """Raised when a leave request breaks a workflow rule (notice, balance, status)."""


class NotFound(DomainError):
    """Raised when a referenced record does not exist."""
