"""Identity, role and binding types used inside IAM policies."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from iampolicy.errors import IdentityParseError

ROLE_PREFIX = "roles/"
PROJECT_ROLE_PREFIX = "projects/"
ORGANIZATION_ROLE_PREFIX = "organizations/"


class IdentityType(Enum):
    USER = "user"
    SERVICE_ACCOUNT = "serviceAccount"
    GROUP = "group"
    DOMAIN = "domain"
    ALL_USERS = "allUsers"
    ALL_AUTHENTICATED_USERS = "allAuthenticatedUsers"
    PROJECT_OWNER = "projectOwner"
    PROJECT_EDITOR = "projectEditor"
    PROJECT_VIEWER = "projectViewer"


# Public principals never carry a value.
_VALUELESS_TYPES = frozenset({IdentityType.ALL_USERS, IdentityType.ALL_AUTHENTICATED_USERS})
_TYPES_BY_PREFIX = {t.value: t for t in IdentityType}


@dataclass(frozen=True, slots=True)
class Identity:
    """A principal that can be granted a role, e.g. ``user:alice@example.com``."""

    type: IdentityType
    value: str | None = None

    @classmethod
    def user(cls, email: str) -> Identity:
        return cls(IdentityType.USER, email)

    @classmethod
    def service_account(cls, email: str) -> Identity:
        return cls(IdentityType.SERVICE_ACCOUNT, email)

    @classmethod
    def group(cls, email: str) -> Identity:
        return cls(IdentityType.GROUP, email)

    @classmethod
    def domain(cls, domain: str) -> Identity:
        return cls(IdentityType.DOMAIN, domain)

    @classmethod
    def all_users(cls) -> Identity:
        return cls(IdentityType.ALL_USERS)

    @classmethod
    def all_authenticated_users(cls) -> Identity:
        return cls(IdentityType.ALL_AUTHENTICATED_USERS)

    @classmethod
    def project_owner(cls, project_id: str) -> Identity:
        return cls(IdentityType.PROJECT_OWNER, project_id)

    @classmethod
    def project_editor(cls, project_id: str) -> Identity:
        return cls(IdentityType.PROJECT_EDITOR, project_id)

    @classmethod
    def project_viewer(cls, project_id: str) -> Identity:
        return cls(IdentityType.PROJECT_VIEWER, project_id)

    def str_value(self) -> str:
        """Render the member string used on the wire."""
        if self.value is None:
            return self.type.value
        return f"{self.type.value}:{self.value}"

    @classmethod
    def value_of(cls, identity_str: str) -> Identity:
        """Parse a member string such as ``group:admins@example.com``."""
        parts = identity_str.split(":")
        if len(parts) > 2:
            raise IdentityParseError(f'Illegal identity string: "{identity_str}"')
        identity_type = _TYPES_BY_PREFIX.get(parts[0])
        if identity_type is None:
            raise IdentityParseError(f'Unexpected identity type in "{identity_str}"')
        if len(parts) == 1:
            if identity_type not in _VALUELESS_TYPES:
                raise IdentityParseError(f'Identity "{identity_str}" requires a value')
            return cls(identity_type)
        if identity_type in _VALUELESS_TYPES:
            raise IdentityParseError(f'Identity "{identity_str}" does not take a value')
        if not parts[1]:
            raise IdentityParseError(f'Identity "{identity_str}" has an empty value')
        return cls(identity_type, parts[1])

    def __str__(self) -> str:
        return self.str_value()


@dataclass(frozen=True, slots=True)
class Role:
    """An IAM role name such as ``roles/storage.objectViewer``."""

    value: str

    @classmethod
    def of(cls, value: str) -> Role:
        """Build a role, adding the ``roles/`` prefix to predefined role names."""
        if not value.startswith((ROLE_PREFIX, PROJECT_ROLE_PREFIX, ORGANIZATION_ROLE_PREFIX)):
            value = ROLE_PREFIX + value
        return cls(value)

    @classmethod
    def owner(cls) -> Role:
        return cls.of("owner")

    @classmethod
    def editor(cls) -> Role:
        return cls.of("editor")

    @classmethod
    def viewer(cls) -> Role:
        return cls.of("viewer")

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True, kw_only=True)
class Condition:
    """Applicability condition attached to a binding (CEL expression)."""

    title: str | None = None
    description: str | None = None
    expression: str | None = None


@dataclass(frozen=True, slots=True)
class Binding:
    """Grant of one role to a set of identities.

    Construction does not validate; malformed bindings are rejected when they
    are handed to ``PolicyBuilder.set_bindings``.
    """

    role: Role | None
    identities: frozenset[Identity] | None = field(default_factory=frozenset)
    condition: Condition | None = None

    @classmethod
    def of(
        cls,
        role: Role | str,
        *identities: Identity | str,
        condition: Condition | None = None,
    ) -> Binding:
        """Convenience constructor accepting role and member strings."""
        resolved_role = Role.of(role) if isinstance(role, str) else role
        members = frozenset(
            Identity.value_of(identity) if isinstance(identity, str) else identity
            for identity in identities
        )
        return cls(resolved_role, members, condition)
