"""Shared base for API response records."""

from pydantic import BaseModel, ConfigDict


class APIRecord(BaseModel):
    """Immutable projection of one JSON object returned by the API.

    Fields the API adds later are ignored rather than rejected.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")
