from enum import Enum


class ErrorKind(Enum):
    BAD_REQUEST = 400
    NOT_FOUND = 404
    UNAUTHORIZED = 401
    INTERNAL_SERVER = 500


class ServiceError(Exception):
    """
    Failure raised by the conversion service.

    Every failure carries one of the four ErrorKind values so the HTTP
    layer can map it without inspecting the message text.
    """

    def __init__(self, kind: ErrorKind, message: str):
        super().__init__(message)
        self.kind = kind
        self.message = message

    @property
    def status_code(self) -> int:
        return self.kind.value

    @classmethod
    def bad_request(cls, message: str) -> "ServiceError":
        return cls(ErrorKind.BAD_REQUEST, message)

    @classmethod
    def not_found(cls, message: str) -> "ServiceError":
        return cls(ErrorKind.NOT_FOUND, message)

    @classmethod
    def unauthorized(cls, message: str) -> "ServiceError":
        return cls(ErrorKind.UNAUTHORIZED, message)

    @classmethod
    def internal_server(cls, message: str) -> "ServiceError":
        return cls(ErrorKind.INTERNAL_SERVER, message)

    def to_dict(self) -> dict:
        return {
            "kind": self.kind.name,
            "status": self.status_code,
            "message": self.message,
        }

    def __repr__(self) -> str:
        return f"ServiceError({self.kind.name}, {self.message!r})"
