"""Models for secrets, their history and bulk imports."""

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, field_validator

from keyenv.models.base import APIRecord


class Secret(APIRecord):
    """Secret metadata. The list and write endpoints never return the value."""

    id: Optional[str] = Field(None, description="Secret ID")
    environment_id: Optional[str] = Field(None, description="Environment the secret belongs to")
    key: str = Field("", description="Secret key, e.g. DATABASE_URL")
    type: str = Field("string", description="Secret type")
    version: Optional[int] = Field(None, description="Current version number")
    description: Optional[str] = Field(None, description="Free-form description")
    created_at: Optional[str] = Field(None, description="Creation timestamp")
    updated_at: Optional[str] = Field(None, description="Last update timestamp")

    @field_validator("key", mode="before")
    @classmethod
    def default_key(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("type", mode="before")
    @classmethod
    def default_type(cls, value: Any) -> Any:
        return "string" if value is None else value


class SecretWithValue(Secret):
    """A secret including its decrypted value."""

    value: str = Field("", description="Decrypted secret value")
    inherited_from: Optional[str] = Field(None, description="Environment the value was inherited from")

    @field_validator("value", mode="before")
    @classmethod
    def default_value(cls, value: Any) -> Any:
        return "" if value is None else value


class SecretHistory(APIRecord):
    """One historical version of a secret."""

    id: Optional[str] = Field(None, description="History entry ID")
    secret_id: Optional[str] = Field(None, description="Secret this entry belongs to")
    value: Optional[str] = Field(None, description="Value at this version")
    version: Optional[int] = Field(None, description="Version number")
    changed_by: Optional[str] = Field(None, description="User who made the change")
    changed_at: Optional[str] = Field(None, description="Change timestamp")


class BulkSecretItem(BaseModel):
    """One secret in a bulk import request."""

    key: str = Field(..., description="Secret key")
    value: str = Field(..., description="Secret value")
    description: Optional[str] = Field(None, description="Optional description")

    def to_dict(self) -> Dict[str, str]:
        """Convert to a request payload item, omitting an unset description."""
        return self.model_dump(exclude_none=True)


class BulkImportResult(APIRecord):
    """Counts reported by a bulk import."""

    created: int = Field(0, description="Secrets created")
    updated: int = Field(0, description="Secrets overwritten")
    skipped: int = Field(0, description="Secrets left untouched")

    @field_validator("created", "updated", "skipped", mode="before")
    @classmethod
    def default_count(cls, value: Any) -> Any:
        return 0 if value is None else value
