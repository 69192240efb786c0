"""Base domain exception."""


class DomainException(Exception):
    """
    Base exception for trust engine errors.

    Every error carries a stable machine-readable code; `retriable` tells
    callers whether repeating the same call may succeed.
    """

    retriable = False

    def __init__(self, message: str, code: str = "DOMAIN_ERROR"):
        self.message = message
        self.code = code
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {"error": self.code, "message": self.message}
