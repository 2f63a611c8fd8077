from collections.abc import Iterator

import pytest
from loguru import logger

from iampolicy import (
    Binding,
    BindingMessage,
    Condition,
    DefaultMarshaller,
    ExprMessage,
    Identity,
    IdentityParseError,
    InvalidEtagError,
    Marshaller,
    Policy,
    PolicyMessage,
    Role,
)


@pytest.fixture
def warnings() -> Iterator[list[str]]:
    messages: list[str] = []
    logger.enable("iampolicy")
    sink_id = logger.add(messages.append, level="WARNING", format="{message}")
    try:
        yield messages
    finally:
        logger.remove(sink_id)
        logger.disable("iampolicy")


def test_single_binding_round_trip() -> None:
    marshaller = DefaultMarshaller()
    message = PolicyMessage(
        version=1,
        bindings=[BindingMessage(role="roles/viewer", members=["user:a@example.com"])],
        etag=b"",
    )

    policy = marshaller.from_pb(message)
    assert policy.etag is None
    assert policy.version == 1
    assert policy.bindings == (Binding(Role.viewer(), frozenset({Identity.user("a@example.com")})),)

    assert marshaller.to_pb(policy) == message


def test_to_pb_rejects_non_ascii_etag() -> None:
    policy = Policy.new_builder().set_etag("\u00e9tag").build()
    with pytest.raises(InvalidEtagError):
        DefaultMarshaller().to_pb(policy)


def test_from_pb_encodes_etag_as_base64() -> None:
    policy = DefaultMarshaller().from_pb(PolicyMessage(etag=b"etag"))
    assert policy.etag == "ZXRhZw=="


def test_to_pb_decodes_etag() -> None:
    policy = Policy.new_builder().set_etag("ZXRhZw==").build()
    assert DefaultMarshaller().to_pb(policy).etag == b"etag"


def test_to_pb_without_etag_leaves_empty_bytes() -> None:
    assert DefaultMarshaller().to_pb(Policy.new_builder().build()).etag == b""


def test_to_pb_rejects_non_base64_etag() -> None:
    policy = Policy.new_builder().set_etag("not base64!").build()
    with pytest.raises(InvalidEtagError):
        DefaultMarshaller().to_pb(policy)


def test_from_pb_preserves_binding_order_and_members() -> None:
    message = PolicyMessage(
        version=3,
        bindings=[
            BindingMessage(role="roles/owner", members=["user:a@example.com", "group:g@example.com"]),
            BindingMessage(role="viewer", members=["allUsers"]),
        ],
    )
    policy = DefaultMarshaller().from_pb(message)
    assert [b.role.value for b in policy.bindings] == ["roles/owner", "roles/viewer"]
    assert policy.bindings[0].identities == frozenset(
        {Identity.user("a@example.com"), Identity.group("g@example.com")}
    )
    assert policy.bindings[1].identities == frozenset({Identity.all_users()})


def test_to_pb_members_come_from_identity_set() -> None:
    policy = Policy.new_builder().set_bindings(
        [Binding.of("roles/editor", "user:a@example.com", "user:b@example.com", "allAuthenticatedUsers")]
    ).build()
    message = DefaultMarshaller().to_pb(policy)
    assert message.bindings[0].role == "roles/editor"
    assert sorted(message.bindings[0].members) == [
        "allAuthenticatedUsers",
        "user:a@example.com",
        "user:b@example.com",
    ]


def test_from_pb_ignores_conditions() -> None:
    message = PolicyMessage(
        version=3,
        bindings=[
            BindingMessage(
                role="roles/viewer",
                members=["user:a@example.com"],
                condition=ExprMessage(title="t", expression="true"),
            )
        ],
    )
    policy = DefaultMarshaller().from_pb(message)
    assert policy.bindings[0].condition is None


def test_to_pb_drops_conditions_with_warning(warnings: list[str]) -> None:
    binding = Binding.of("roles/viewer", "user:a@example.com", condition=Condition(expression="true"))
    policy = Policy.new_builder().set_bindings([binding]).build()

    message = DefaultMarshaller().to_pb(policy)

    assert message.bindings[0].condition is None
    assert len(warnings) == 1
    assert "roles/viewer" in warnings[0]


def test_from_pb_propagates_identity_parse_failures() -> None:
    message = PolicyMessage(bindings=[BindingMessage(role="roles/viewer", members=["robot:r2d2"])])
    with pytest.raises(IdentityParseError):
        DefaultMarshaller().from_pb(message)


def test_identity_functions_are_injectable() -> None:
    marshaller = DefaultMarshaller(
        parse_identity=lambda member: Identity.user(member),
        format_identity=lambda identity: identity.value or "",
    )
    message = PolicyMessage(bindings=[BindingMessage(role="roles/viewer", members=["a@example.com"])])

    policy = marshaller.from_pb(message)
    assert policy.bindings[0].identities == frozenset({Identity.user("a@example.com")})
    assert marshaller.to_pb(policy).bindings[0].members == ["a@example.com"]


def test_custom_marshaller_satisfies_protocol() -> None:
    class DictMarshaller:
        def from_pb(self, message: dict[str, int]) -> Policy:
            return Policy.new_builder().set_version(message["version"]).build()

        def to_pb(self, policy: Policy) -> dict[str, int]:
            return {"version": policy.version}

    marshaller: Marshaller[dict[str, int]] = DictMarshaller()
    assert marshaller.to_pb(marshaller.from_pb({"version": 3})) == {"version": 3}
