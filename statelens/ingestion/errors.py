"""Errors raised at the fetch boundary."""


class FetchError(RuntimeError):
    """A remote document could not be fetched or has an unusable shape."""
