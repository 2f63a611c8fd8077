"""IAM policy value object, builder and wire marshalling."""

from loguru import logger

from iampolicy.errors import (
    BindingsMissingError,
    IdentitiesMissingError,
    IdentityParseError,
    InvalidEtagError,
    NullBindingError,
    NullIdentityError,
    PolicyArgumentError,
    PolicyError,
    PolicyPreconditionError,
    RoleMissingError,
)
from iampolicy.identity import Binding, Condition, Identity, IdentityType, Role
from iampolicy.marshaller import DefaultMarshaller, Marshaller
from iampolicy.policy import Policy, PolicyBuilder
from iampolicy.wire import BindingMessage, ExprMessage, PolicyMessage

# Library code stays quiet unless the application opts in.
logger.disable("iampolicy")

__all__ = [
    "Binding",
    "BindingMessage",
    "BindingsMissingError",
    "Condition",
    "DefaultMarshaller",
    "ExprMessage",
    "IdentitiesMissingError",
    "Identity",
    "IdentityParseError",
    "IdentityType",
    "InvalidEtagError",
    "Marshaller",
    "NullBindingError",
    "NullIdentityError",
    "Policy",
    "PolicyArgumentError",
    "PolicyBuilder",
    "PolicyError",
    "PolicyMessage",
    "PolicyPreconditionError",
    "RoleMissingError",
]
