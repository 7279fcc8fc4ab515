"""Storefront error types not covered by Protean's own exceptions.

Missing references surface as ``protean.exceptions.ObjectNotFoundError`` and
bad input as ``protean.exceptions.ValidationError``. The classes here cover the
remaining two outcomes: conflicts and internal failures.
"""


class StorefrontError(Exception):
    """Base for storefront errors. ``messages`` maps a key to a list of messages."""

    def __init__(self, messages):
        if isinstance(messages, str):
            messages = {"_entity": [messages]}
        self.messages = messages
        super().__init__(messages)


class ConflictError(StorefrontError):
    """A uniqueness rule was violated."""


class InternalServerError(StorefrontError):
    """An operation failed after validation, on our side."""


class StockDeductionError(InternalServerError):
    """Stock could not be deducted for an order; the order was rolled back."""


class IdentifierExhaustedError(InternalServerError):
    """No unique identifier could be generated within the attempt budget."""
