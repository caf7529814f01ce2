"""Shared Pydantic base models."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class StrictBaseModel(BaseModel):
    """Base model with strict, immutable defaults."""

    model_config = ConfigDict(frozen=True, extra="forbid")


class ClientPayloadModel(BaseModel):
    """Immutable model for payloads produced by the browser client.

    Client storage uses camelCase keys and carries UI-only fields the
    ranking core never reads, so unknown keys are ignored rather than
    rejected.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        alias_generator=to_camel,
        populate_by_name=True,
    )
