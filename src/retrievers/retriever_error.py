"""Errors raised by retrievers."""


class RetrievalError(Exception):
    """Context could not be retrieved for the query."""

    status_code = 500
