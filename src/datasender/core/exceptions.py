class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is missing, malformed or violates domain rules."""


class AuthenticationError(DomainError):
    """Raised when the identity provider rejects credentials or is unreachable."""


class DeliveryError(DomainError):
    """Raised when a report or return could not be delivered.

    The submitted data is kept so the operator can retry.
    """


class DeliveryTimeoutError(DeliveryError):
    """Raised when the delivery collaborator did not answer in time."""


class SubmissionInProgressError(DomainError):
    """Raised when the sheet is mutated or resubmitted while a submission is in flight."""


class ConfigurationError(DomainError):
    """Raised at startup when a selected backend is missing required settings."""
