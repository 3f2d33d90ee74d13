"""Models for the authenticated caller."""

from typing import List, Optional

from pydantic import Field

from keyenv.models.base import APIRecord


class User(APIRecord):
    """A user account or service token, as returned by ``/users/me``."""

    id: Optional[str] = Field(None, description="User or service token ID")
    email: Optional[str] = Field(None, description="Account email (users only)")
    name: Optional[str] = Field(None, description="Display name")
    clerk_id: Optional[str] = Field(None, description="Identity provider ID")
    avatar_url: Optional[str] = Field(None, description="Avatar image URL")
    auth_type: Optional[str] = Field(None, description="Authentication type, e.g. service_token")
    team_id: Optional[str] = Field(None, description="Owning team (service tokens)")
    project_ids: Optional[List[str]] = Field(None, description="Projects a service token is scoped to")
    scopes: Optional[List[str]] = Field(None, description="Granted token scopes")
    created_at: Optional[str] = Field(None, description="Creation timestamp")
