"""Backend runtime exception hierarchy."""


class BackendError(Exception):
    """Base backend runtime error."""


class ArgumentError(BackendError):
    """Raised when backend arguments do not match the option schema."""


class ValidationError(BackendError):
    """Raised when parsed input is not acceptable for a backend."""


class BackendRegistrationError(BackendError):
    """Raised when a backend cannot be added to the dispatcher."""


class BackendManifestError(BackendError):
    """Raised when backend roster parsing/validation fails."""


class BackendImportError(BackendError):
    """Raised when backend module/class import fails."""
