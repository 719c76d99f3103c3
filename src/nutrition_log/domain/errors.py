"""Errors raised by the food retrieval and serving layers."""


class CatalogUnavailableError(RuntimeError):
    """The catalog store could not be read or written."""


class InvalidServingError(ValueError):
    """A serving selection does not resolve to a positive gram amount."""
