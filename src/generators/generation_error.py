"""Errors raised by response generators."""


class GenerationError(Exception):
    """Response could not be generated."""

    status_code = 500

    def __init__(self, message: str) -> None:
        """Construct the error with the generic prefix."""
        super().__init__(f"Error generating response: {message}")
