"""Custom exceptions for circuit solving and element handling."""


class CircuitValidationError(ValueError):
    """Raised when a circuit element or element list is malformed."""


class ElementSchemaError(CircuitValidationError):
    """Raised when serialized element data does not match the schema."""

    def __init__(self, message: str, index: int | None = None, field: str | None = None):
        super().__init__(message)
        self.index = index
        self.field = field


class SingularCircuitError(RuntimeError):
    """Raised when an MNA system has no usable pivot."""

    def __init__(self, message: str, column: int | None = None):
        super().__init__(message)
        self.column = column
