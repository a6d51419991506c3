"""Per-request correlation id, shared with log records via a ContextVar."""

import uuid
from contextvars import ContextVar

request_id_var: ContextVar[str] = ContextVar("request_id", default="")


def generate_request_id() -> str:
    return uuid.uuid4().hex


def get_request_id() -> str:
    """Request id of the request being served, or an empty string outside one."""
    return request_id_var.get()


def set_request_id(request_id: str) -> None:
    request_id_var.set(request_id)
