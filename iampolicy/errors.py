"""Error types raised while building and converting IAM policies."""

from __future__ import annotations


class PolicyError(ValueError):
    """Base class for policy construction and conversion failures."""

    message = "invalid policy"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.message)


class PolicyPreconditionError(PolicyError):
    """A required reference was absent."""


class BindingsMissingError(PolicyPreconditionError):
    message = "The provided list of bindings cannot be None."


class NullBindingError(PolicyPreconditionError):
    message = "A binding in the list cannot be None."


class RoleMissingError(PolicyPreconditionError):
    message = "The role cannot be None."


class IdentitiesMissingError(PolicyPreconditionError):
    message = "A role cannot be assigned to a None set of identities."


class PolicyArgumentError(PolicyError):
    """A value was present but not acceptable."""


class NullIdentityError(PolicyArgumentError):
    message = "None identities are not permitted."


class InvalidEtagError(PolicyArgumentError):
    message = "etag is not valid base64"


class IdentityParseError(PolicyError):
    """An identity string could not be parsed."""

    message = "illegal identity string"
