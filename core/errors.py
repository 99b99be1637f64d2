"""
core/errors.py -- Domain error taxonomy for the alert service.

Stores and the auth resolver raise these; api/main.py registers one exception
handler per family and turns each into exactly one HTTP status:

  ValidationError -> 400
  AuthError       -> 401
  NotFoundError   -> 404
  ConflictError   -> 409
  UpstreamError   -> 500  (logged server-side, detail withheld)

`message` is the only text a client ever sees. It must never contain store
error text, digests, or tokens. The underlying cause, if any, is chained with
`raise ... from exc` so it still reaches the server log.

Layer rule: core/ is the kernel. No project imports.
"""

from __future__ import annotations


class AlertServiceError(Exception):
    """Base class for every error the service raises on purpose."""

    code: str = "error"
    message: str = "Request failed."

    def __init__(self, message: str | None = None) -> None:
        if message is not None:
            self.message = message
        super().__init__(self.message)


# ---------------------------------------------------------------------------
# 400
# ---------------------------------------------------------------------------


class ValidationError(AlertServiceError):
    code = "validation_error"
    message = "Missing or malformed input."


class InvalidInput(ValidationError):
    """A required field is absent or empty."""

    code = "invalid_input"
    message = "Missing fields."


# ---------------------------------------------------------------------------
# 401
# ---------------------------------------------------------------------------


class AuthError(AlertServiceError):
    code = "unauthorized"
    message = "Authentication required."


class MissingCredential(AuthError):
    code = "missing_credential"
    message = "No auth."


class MalformedCredential(AuthError):
    code = "malformed_credential"
    message = "Invalid auth header."


class InvalidToken(AuthError):
    code = "invalid_token"
    message = "Invalid token."


class UnknownIdentity(AuthError):
    code = "unknown_identity"
    message = "User not found."


class InvalidCredentials(AuthError):
    """Wrong email or wrong password. Deliberately indistinguishable."""

    code = "bad_credentials"
    message = "Invalid credentials."


# ---------------------------------------------------------------------------
# 404 / 409 / 500
# ---------------------------------------------------------------------------


class NotFoundError(AlertServiceError):
    code = "not_found"
    message = "Not found."


class ConflictError(AlertServiceError):
    code = "conflict"
    message = "Conflict."


class DuplicateIdentity(ConflictError):
    code = "user_exists"
    message = "User exists."


class UpstreamError(AlertServiceError):
    code = "server_error"
    message = "Server error."
