class EFormError(Exception):
    """Base class for form configuration errors."""


class ValidationError(EFormError, ValueError):
    """User-correctable input gap, raised before any store call."""


class ParseError(EFormError):
    """Stored ConfigurationJSON could not be parsed into a form schema."""


class StoreError(EFormError):
    """The list store failed to read or write an item."""
