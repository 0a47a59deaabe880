from typing import List

from httpx import TransportError as HttpxTransportError


class SqsError(Exception):
    pass


class ConfigurationError(SqsError):
    def __init__(self, missing: List[str]):
        self.missing = missing

    def __str__(self):
        return f"Missing client configuration: {', '.join(self.missing)}"


class SigningError(SqsError):
    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason

    def __str__(self):
        return f"Unable to sign request for '{self.url}': {self.reason}"


class TransportError(SqsError):
    def __init__(self, action: str, error: HttpxTransportError):
        self.action = action
        self.error = error

    def __str__(self):
        return f"{self.action} request failed: {self.error!r}"


class ProtocolError(SqsError):
    def __init__(
        self,
        status: int,
        reason: str,
        error=None,
        body: str = "",
        note: str | None = None,
    ):
        self.status = status
        self.reason = reason
        self.error = error
        self.body = body
        self.note = note

    def __str__(self):
        if self.error is not None:
            return f"Service error '{self.status} {self.reason}'. {self.error}"
        return f"Service error '{self.status} {self.reason}'. Context: {self.note}"


class DecodeError(SqsError):
    def __init__(self, action: str, reason: str):
        self.action = action
        self.reason = reason

    def __str__(self):
        return f"Unable to decode {self.action} response: {self.reason}"
