from typing import Any

from pydantic import AliasChoices, BaseModel, Field, model_validator

CODE_OK = 0


class NameRequest(BaseModel):
    name: str


class KeysRequest(NameRequest):
    keys: list[str]


class PutRequest(KeysRequest):
    values: list[str | None]

    @model_validator(mode="after")
    def check_lengths(self):
        if len(self.keys) != len(self.values):
            raise ValueError("Number of keys and values does not match")
        return self


class Envelope(BaseModel):
    """Response wrapper. Success is decided by `code`, not the HTTP status."""

    code: int = Field(validation_alias=AliasChoices("code", "status"))
    message: str | None = None
    body: Any = Field(None, validation_alias=AliasChoices("body", "results"))

    @property
    def ok(self) -> bool:
        return self.code == CODE_OK
