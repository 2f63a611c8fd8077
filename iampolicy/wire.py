"""Wire schema for IAM policies (mirrors ``google.iam.v1.Policy``)."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class WireModel(BaseModel):
    """Base model with strict parsing and base64 bytes in JSON."""

    model_config = ConfigDict(
        extra="forbid",
        populate_by_name=True,
        ser_json_bytes="base64",
        val_json_bytes="base64",
    )


class ExprMessage(WireModel):
    """Common expression language condition."""

    expression: str = ""
    title: str = ""
    description: str = ""
    location: str = ""


class BindingMessage(WireModel):
    role: str = ""
    members: list[str] = Field(default_factory=list)
    condition: ExprMessage | None = None


class PolicyMessage(WireModel):
    """Policy message as exchanged with the IAM service."""

    version: int = 0
    bindings: list[BindingMessage] = Field(default_factory=list)
    etag: bytes = b""

    def to_json(self) -> str:
        return self.model_dump_json(exclude_none=True)

    @classmethod
    def from_json(cls, payload: str | bytes) -> PolicyMessage:
        return cls.model_validate_json(payload)
