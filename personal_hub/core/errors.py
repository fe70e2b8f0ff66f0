"""Domain errors raised by repositories and services.

Route handlers never build error responses themselves; the handlers in
``personal_hub.api.errors`` translate these into HTTP responses.
"""

from __future__ import annotations

from typing import Any


class HubError(Exception):
    status_code = 500

    def __init__(self, message: str, *, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details


class ValidationFailed(HubError):
    status_code = 400


class ConflictError(HubError):
    status_code = 400


class AuthenticationError(HubError):
    status_code = 401


class NotFoundError(HubError):
    status_code = 404

    def __init__(self, entity: str) -> None:
        super().__init__(f"{entity} not found")
        self.entity = entity
