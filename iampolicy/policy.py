"""Immutable IAM policy value object and its builder."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from iampolicy.errors import (
    BindingsMissingError,
    IdentitiesMissingError,
    NullBindingError,
    NullIdentityError,
    RoleMissingError,
)
from iampolicy.identity import Binding, Condition


@dataclass(frozen=True, slots=True, kw_only=True)
class Policy:
    """Versioned list of role bindings plus an optimistic-concurrency etag.

    Instances are immutable; use ``to_builder()`` to derive a modified copy.
    Version 0 policies are restricted by the service to the legacy owner,
    editor and viewer roles. That restriction is not enforced here.
    """

    bindings: tuple[Binding, ...] = ()
    etag: str | None = None
    version: int = 0

    def __post_init__(self) -> None:
        object.__setattr__(self, "bindings", tuple(_copy_bindings(self.bindings)))

    @staticmethod
    def new_builder() -> PolicyBuilder:
        """Return an empty builder."""
        return PolicyBuilder()

    def to_builder(self) -> PolicyBuilder:
        """Return a builder seeded with this policy's fields."""
        return PolicyBuilder.from_policy(self)


def _check_bindings(bindings: list[Binding]) -> None:
    for binding in bindings:
        if binding is None:
            raise NullBindingError()
        if binding.role is None or binding.role.value is None:
            raise RoleMissingError()
        if binding.identities is None:
            raise IdentitiesMissingError()
        if None in binding.identities:
            raise NullIdentityError()


def _copy_binding(binding: Binding) -> Binding:
    condition = None
    if binding.condition is not None:
        condition = Condition(
            title=binding.condition.title,
            description=binding.condition.description,
            expression=binding.condition.expression,
        )
    return Binding(binding.role, frozenset(binding.identities), condition)


def _copy_bindings(bindings: Iterable[Binding] | None) -> list[Binding]:
    if bindings is None:
        raise BindingsMissingError()
    candidates = list(bindings)
    _check_bindings(candidates)
    return [_copy_binding(binding) for binding in candidates]


class PolicyBuilder:
    """Mutable staging area for a ``Policy``.

    Not safe for concurrent mutation.
    """

    def __init__(self) -> None:
        self._bindings: list[Binding] = []
        self._etag: str | None = None
        self._version = 0

    @classmethod
    def from_policy(cls, policy: Policy) -> PolicyBuilder:
        builder = cls()
        builder.set_bindings(policy.bindings)
        builder.set_etag(policy.etag)
        builder.set_version(policy.version)
        return builder

    def set_bindings(self, bindings: Iterable[Binding] | None) -> PolicyBuilder:
        """Replace the staged bindings with copies of ``bindings``.

        Raises:
            BindingsMissingError: ``bindings`` is None.
            NullBindingError: an entry of ``bindings`` is None.
            RoleMissingError: a binding has no role.
            IdentitiesMissingError: a binding has no identity set.
            NullIdentityError: an identity set contains None.

        The builder is left unchanged when any check fails.
        """
        self._bindings = _copy_bindings(bindings)
        return self

    def set_etag(self, etag: str | None) -> PolicyBuilder:
        """Set the etag echoed back to the service on read-modify-write updates.

        Pass the etag returned by a read of the policy so that a concurrent
        update is detected instead of being overwritten. Without an etag the
        stored policy is replaced blindly.
        """
        self._etag = etag
        return self

    def set_version(self, version: int) -> PolicyBuilder:
        """Set the policy schema version.

        Meant for marshallers; the legal values are defined by the service.
        """
        self._version = version
        return self

    def build(self) -> Policy:
        return Policy(bindings=tuple(self._bindings), etag=self._etag, version=self._version)
