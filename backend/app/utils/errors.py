"""Error types raised by the expense core."""


class ValidationError(ValueError):
    """Caller-supplied data violates a precondition.

    Always carries a human-readable reason; routes turn it into a 400.
    """

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self):
        return {"error": self.message}
