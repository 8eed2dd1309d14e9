# baytkom/core/errors.py
from fastapi import HTTPException


class Unauthorized(HTTPException):
    def __init__(self, detail: str = "Not authenticated"):
        super().__init__(status_code=401, detail=detail)


class Forbidden(HTTPException):
    def __init__(self, detail: str = "Forbidden"):
        super().__init__(status_code=403, detail=detail)


class MissingPermission(Forbidden):
    """Raised when the caller lacks a capability; the message names it."""

    def __init__(self, capability: str):
        self.capability = capability
        super().__init__(f"Missing permission: {capability}")


class NotFound(HTTPException):
    def __init__(self, entity: str = "Resource"):
        super().__init__(status_code=404, detail=f"{entity} not found")


class ValidationError(HTTPException):
    def __init__(self, detail: str):
        super().__init__(status_code=400, detail=detail)
