"""Typed failures raised by the registry. Every one of them means the operation did not happen."""

from typing import Optional


class RegistryError(Exception):
    """Base registry error."""
    pass


class InvalidFee(RegistryError):
    """Tendered amount does not exactly match the required fee."""
    def __init__(self, required: int, tendered: int):
        self.required = required
        self.tendered = tendered
        super().__init__(f"Invalid fee: required {required}, tendered {tendered}")


class IndexOutOfRange(RegistryError):
    """Referenced file index is not below the current file count."""
    def __init__(self, file_index: int, file_count: int):
        self.file_index = file_index
        self.file_count = file_count
        super().__init__(f"File index {file_index} out of range (file count {file_count})")


class NotOwner(RegistryError):
    """Caller lacks the admin capability."""
    def __init__(self, caller: str, owner: str):
        self.caller = caller
        self.owner = owner
        super().__init__(f"Not owner: caller {caller}")


class NothingToWithdraw(RegistryError):
    def __init__(self):
        super().__init__("Nothing to withdraw: balance is zero")


class ArithmeticOverflow(RegistryError):
    """A fee or balance computation exceeded the unsigned 256-bit range."""
    def __init__(self, what: str, value: Optional[int] = None):
        self.what = what
        self.value = value
        super().__init__(f"Arithmetic overflow in {what}")


class InvalidValue(RegistryError, ValueError):
    """An identity or parameter value is malformed."""
    pass
