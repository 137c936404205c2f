"""
Rejections raised by the ledger engine

Each one carries the sentinel code the front end matches on to pick a
localized message. They are raised before any write is issued.
"""


class ActionRejected(Exception):
    """Expected, recoverable rejection of a user action"""

    code = "error"

    def __init__(self, message: str = ""):
        super().__init__(message or self.code)
        self.message = message or self.code


class DuplicateNameError(ActionRejected):
    code = "duplicate"


class InsufficientStockError(ActionRejected):
    code = "not_enough"


class RecordNotFoundError(ActionRejected):
    code = "not_found"


class InvalidFormValue(ActionRejected):
    code = "invalid_input"
