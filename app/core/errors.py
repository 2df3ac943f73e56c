from typing import Dict, List, Optional


class MutationError(Exception):
    """Base class for every failure a board mutation can report.

    ``kind`` is the stable name sent to clients, ``status_code`` the HTTP
    status the API answers with, and ``fields`` maps a field name to the
    messages a form should display next to it.
    """

    kind = "MutationError"
    status_code = 400

    def __init__(self, message: str, fields: Optional[Dict[str, List[str]]] = None):
        super().__init__(message)
        self.message = message
        self.fields = fields or {}

    def to_dict(self) -> dict:
        return {"kind": self.kind, "message": self.message, "fields": self.fields}


class MalformedRequest(MutationError):
    kind = "MalformedRequest"
    status_code = 400


class UnknownIntent(MutationError):
    kind = "UnknownIntent"
    status_code = 400


class NotFound(MutationError):
    # Also raised for entities owned by someone else.
    kind = "NotFound"
    status_code = 404


class ValidationFailed(MutationError):
    kind = "ValidationFailed"
    status_code = 422


class RequestFailed(MutationError):
    # The request never produced a usable answer (timeout, disconnect, bad body).
    kind = "RequestFailed"
    status_code = 503


ERROR_KINDS = {
    cls.kind: cls for cls in (MalformedRequest, UnknownIntent, NotFound, ValidationFailed, RequestFailed)
}


def error_from_dict(data: dict) -> MutationError:
    """Rebuild a MutationError from its wire form (used by the client)."""
    cls = ERROR_KINDS.get(data.get("kind", ""), MutationError)
    return cls(data.get("message", ""), data.get("fields") or {})
