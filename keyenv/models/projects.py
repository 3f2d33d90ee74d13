"""Models for projects and their environments."""

from typing import Any, List, Optional

from pydantic import Field, field_validator

from keyenv.models.base import APIRecord


class Project(APIRecord):
    """A project owned by a team."""

    id: Optional[str] = Field(None, description="Project ID")
    team_id: Optional[str] = Field(None, description="Owning team ID")
    name: Optional[str] = Field(None, description="Project name")
    slug: Optional[str] = Field(None, description="URL-safe project slug")
    description: Optional[str] = Field(None, description="Project description")
    created_at: Optional[str] = Field(None, description="Creation timestamp")


class Environment(APIRecord):
    """An environment (development, staging, production, ...) within a project."""

    id: Optional[str] = Field(None, description="Environment ID")
    project_id: Optional[str] = Field(None, description="Parent project ID")
    name: Optional[str] = Field(None, description="Environment name")
    inherits_from: Optional[str] = Field(None, description="Environment this one inherits secrets from")
    created_at: Optional[str] = Field(None, description="Creation timestamp")


class ProjectWithEnvironments(Project):
    """A project together with its environments."""

    environments: List[Environment] = Field(default_factory=list, description="Project environments")

    @field_validator("environments", mode="before")
    @classmethod
    def default_environments(cls, value: Any) -> Any:
        """Treat a null environment list as empty."""
        return [] if value is None else value
