"""Module: errors.

Domain error taxonomy shared by the stores and the prescription service.
Every error is terminal for the call that raised it; nothing here is retried.
"""


class DomainError(Exception):
    code = "domain_error"
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


# Malformed or incomplete input (empty medication list, unknown status, ...).
class ValidationError(DomainError):
    code = "validation_error"
    status_code = 400


# A referenced prescription, user or pharmacy does not exist.
class NotFoundError(DomainError):
    code = "not_found"
    status_code = 404


# Caller is authenticated but its role may not perform the mutation.
class ForbiddenError(DomainError):
    code = "forbidden"
    status_code = 403


# Duplicate dispatch of a prescription to the same pharmacy.
class ConflictError(DomainError):
    code = "conflict"
    status_code = 409


# No authenticated identity was supplied.
class AuthenticationError(DomainError):
    code = "not_authenticated"
    status_code = 401
