"""Errors raised by the quote, order and ledger services.

Every error carries a machine-readable ``reason`` and a human readable
``message``; :mod:`collection_server.api.errors` turns them into JSON
responses at the request boundary.
"""


class PaymentFlowError(Exception):
    status_code = 500
    reason = "internal_error"

    def __init__(self, message: str, reason: str | None = None):
        super().__init__(message)
        self.message = message
        if reason is not None:
            self.reason = reason


class ValidationError(PaymentFlowError):
    """Client input is malformed. Never mutates state."""

    status_code = 400
    reason = "invalid_body"


class VerificationError(PaymentFlowError):
    """Payment signature does not match. Never mutates state."""

    status_code = 400
    reason = "invalid_signature"


class ProviderError(PaymentFlowError):
    """The payment provider call failed before any local state was touched."""

    status_code = 502
    reason = "provider_error"


class StorageError(PaymentFlowError):
    """The ledger transaction failed and was rolled back."""

    status_code = 500
    reason = "storage_error"


class ConfigurationError(PaymentFlowError):
    status_code = 500
    reason = "not_configured"
