"""Exception hierarchy shared by the tensor_calc modules."""


class TensorError(ValueError):
    """
    Base class for every failure raised by tensor_calc.

    Subclasses set ``kind`` so that ``str(err)`` reads like
    "Invalid metric tensor: Metric tensor must be square".
    """
    kind = "Tensor error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return f"{self.kind}: {self.message}"


class InvalidMetricError(TensorError):
    """Metric input that cannot form an n x n tensor."""
    kind = "Invalid metric tensor"


class ComputationError(TensorError):
    """Unsupported request or broken invariant during a computation."""
    kind = "Computation error"


class JsonError(TensorError):
    """Malformed JSON handed to the command-line interface."""
    kind = "JSON parsing error"

# End of errors.py
