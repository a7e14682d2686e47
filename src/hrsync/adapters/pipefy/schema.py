"""Pydantic models describing the Pipefy API payloads."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator


class PipefyBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class CardFieldPayload(PipefyBaseModel):
    name: str
    value: str | None = None

    @field_validator("value", mode="before")
    @classmethod
    def _coerce_scalar(cls, value: object) -> object:
        if value is None or isinstance(value, str):
            return value
        if isinstance(value, bool | int | float):
            return str(value)
        return value


class CardPayload(PipefyBaseModel):
    id: str
    title: str | None = None
    fields: list[CardFieldPayload] = Field(default_factory=list)

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: object) -> object:
        return str(value) if isinstance(value, int) else value


class PageInfo(PipefyBaseModel):
    has_next_page: bool = Field(default=False, alias="hasNextPage")
    end_cursor: str | None = Field(default=None, alias="endCursor")


class CardEdge(PipefyBaseModel):
    node: CardPayload


class CardConnection(PipefyBaseModel):
    page_info: PageInfo = Field(default_factory=PageInfo, alias="pageInfo")
    edges: list[CardEdge] = Field(default_factory=list)


class PhasePayload(PipefyBaseModel):
    id: str | None = None
    name: str | None = None
    cards: CardConnection = Field(default_factory=CardConnection)


class PhaseCardsData(PipefyBaseModel):
    phase: PhasePayload | None = None


class CreatedCardPayload(PipefyBaseModel):
    card: CardPayload | None = None


class CreateCardData(PipefyBaseModel):
    create_card: CreatedCardPayload | None = Field(default=None, alias="createCard")


class TokenResponse(PipefyBaseModel):
    access_token: str = ""
    expires_in: int | None = None
    token_type: str | None = None


class GraphQLResponse(PipefyBaseModel):
    data: dict[str, object] | None = None
    errors: list[object] = Field(default_factory=list)
