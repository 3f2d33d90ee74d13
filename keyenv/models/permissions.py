"""Models for environment permissions and project defaults."""

from enum import Enum
from typing import Any, Optional

from pydantic import Field, field_validator

from keyenv.models.base import APIRecord


class EnvironmentRole(str, Enum):
    """Enum for environment access roles."""

    NONE = "none"
    READ = "read"
    WRITE = "write"
    ADMIN = "admin"


class EnvironmentPermission(APIRecord):
    """A user's role on one environment."""

    id: Optional[str] = Field(None, description="Permission ID")
    environment_id: Optional[str] = Field(None, description="Environment ID")
    user_id: Optional[str] = Field(None, description="User the role is granted to")
    role: Optional[str] = Field(None, description="Granted role")
    user_email: Optional[str] = Field(None, description="User email")
    user_name: Optional[str] = Field(None, description="User display name")
    granted_by: Optional[str] = Field(None, description="User who granted the role")
    created_at: str = Field("", description="Creation timestamp")
    updated_at: str = Field("", description="Last update timestamp")

    @field_validator("created_at", "updated_at", mode="before")
    @classmethod
    def default_timestamp(cls, value: Any) -> Any:
        return "" if value is None else value


class MyPermission(APIRecord):
    """The caller's own effective access to one environment."""

    environment_id: Optional[str] = Field(None, description="Environment ID")
    environment_name: Optional[str] = Field(None, description="Environment name")
    role: Optional[str] = Field(None, description="Effective role")
    can_read: bool = Field(False, description="Caller may read secrets")
    can_write: bool = Field(False, description="Caller may write secrets")
    can_admin: bool = Field(False, description="Caller may manage permissions")

    @field_validator("can_read", "can_write", "can_admin", mode="before")
    @classmethod
    def default_flag(cls, value: Any) -> Any:
        return False if value is None else value


class ProjectDefault(APIRecord):
    """Default role applied to new members for one environment of a project."""

    id: Optional[str] = Field(None, description="Default ID")
    project_id: Optional[str] = Field(None, description="Project ID")
    environment_name: Optional[str] = Field(None, description="Environment name")
    default_role: Optional[str] = Field(None, description="Default role")
    created_at: str = Field("", description="Creation timestamp")

    @field_validator("created_at", mode="before")
    @classmethod
    def default_timestamp(cls, value: Any) -> Any:
        return "" if value is None else value
