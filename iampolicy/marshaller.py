"""Conversion between ``Policy`` and wire policy messages."""

from __future__ import annotations

import base64
import binascii
from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol, TypeVar

from loguru import logger

from iampolicy.errors import InvalidEtagError
from iampolicy.identity import Binding, Identity, Role
from iampolicy.policy import Policy
from iampolicy.wire import BindingMessage, PolicyMessage

T = TypeVar("T")


class Marshaller(Protocol[T]):
    """Two-way converter between ``Policy`` and a wire message type ``T``."""

    def from_pb(self, message: T) -> Policy:
        """Build a policy from one wire message."""

    def to_pb(self, policy: Policy) -> T:
        """Render a policy as one wire message."""


@dataclass(frozen=True, slots=True)
class DefaultMarshaller:
    """Marshaller for ``PolicyMessage``.

    Binding conditions are not carried in either direction, so
    ``from_pb(to_pb(p))`` drops conditions. Member order on the wire follows
    set iteration order and is not stable.
    """

    parse_identity: Callable[[str], Identity] = Identity.value_of
    format_identity: Callable[[Identity], str] = Identity.str_value

    def from_pb(self, message: PolicyMessage) -> Policy:
        # TODO: populate Binding.condition from BindingMessage.condition.
        bindings = [
            Binding(
                Role.of(binding_pb.role),
                frozenset(self.parse_identity(member) for member in binding_pb.members),
            )
            for binding_pb in message.bindings
        ]
        etag = base64.b64encode(message.etag).decode("ascii") if message.etag else None
        logger.debug("decoded policy v{} with {} bindings", message.version, len(bindings))
        return (
            Policy.new_builder()
            .set_bindings(bindings)
            .set_etag(etag)
            .set_version(message.version)
            .build()
        )

    def to_pb(self, policy: Policy) -> PolicyMessage:
        bindings_pb: list[BindingMessage] = []
        for binding in policy.bindings:
            if binding.condition is not None:
                logger.warning(f"condition on {binding.role.value} is not encoded; dropping it")
            bindings_pb.append(
                BindingMessage(
                    role=binding.role.value,
                    members=[self.format_identity(identity) for identity in binding.identities],
                )
            )
        etag = b""
        if policy.etag is not None:
            try:
                etag = base64.b64decode(policy.etag, validate=True)
            except (binascii.Error, ValueError) as e:
                raise InvalidEtagError(f"etag is not valid base64: {policy.etag!r}") from e
        logger.debug("encoded policy v{} with {} bindings", policy.version, len(bindings_pb))
        return PolicyMessage(version=policy.version, bindings=bindings_pb, etag=etag)
