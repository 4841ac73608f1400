"""Exceptions raised by the quote engine."""


class QuoteValidationError(ValueError):
    """Quote input is structurally invalid (bad session count, missing level)."""

    def __init__(self, field: str, message: str):
        super().__init__(f"{field}: {message}")
        self.field = field
        self.message = message
