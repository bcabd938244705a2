from typing import Any


class ModdoError(Exception):
    """Base error carrying the API error code and HTTP status."""

    status_code = 500

    def __init__(self, code: str, message: str, details: Any = None, status_code: int | None = None):
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details
        if status_code is not None:
            self.status_code = status_code

    def to_dict(self) -> dict:
        err = {"code": self.code, "message": self.message}
        if self.details is not None:
            err["details"] = self.details
        return err


class ValidationFailed(ModdoError):
    status_code = 400


class Forbidden(ModdoError):
    status_code = 403


class NotFound(ModdoError):
    status_code = 404


class ServiceFailed(ModdoError):
    status_code = 500


# Collaborator failures. Routes wrap these into their own failure code.
class ReconstructionError(RuntimeError):
    pass


class ConversionError(RuntimeError):
    pass


class UploadError(RuntimeError):
    pass
