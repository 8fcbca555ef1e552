"""Typed errors raised by repositories and services.

The transport layer maps each family to one HTTP status; the message is the
only thing a client ever sees.
"""


class CRMError(Exception):
    """Base class for all domain errors."""

    default_message = "request failed"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class NotFoundError(CRMError):
    default_message = "not found"


class MaterialNotFoundError(NotFoundError):
    default_message = "material not found"


class WarehouseNotFoundError(NotFoundError):
    default_message = "warehouse not found"


class SupplierNotFoundError(NotFoundError):
    default_message = "supplier not found"


class SectionNotFoundError(NotFoundError):
    default_message = "section not found"


class UserNotFoundError(NotFoundError):
    default_message = "user not found"


class NotAllowedError(CRMError):
    default_message = "not allowed"


class AlreadyExistsError(CRMError):
    default_message = "already exists"


class InvalidInputError(CRMError):
    default_message = "invalid input"


class InternalError(CRMError):
    default_message = "internal error"


class StorageCorruptionError(InternalError):
    """Stored data could not be decoded back into its domain shape."""

    default_message = "stored data is corrupted"
