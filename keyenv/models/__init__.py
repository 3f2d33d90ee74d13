"""Pydantic models for KeyEnv API records."""

from keyenv.models.users import User
from keyenv.models.projects import (
    Environment,
    Project,
    ProjectWithEnvironments
)
from keyenv.models.secrets import (
    BulkImportResult,
    BulkSecretItem,
    Secret,
    SecretHistory,
    SecretWithValue
)
from keyenv.models.permissions import (
    EnvironmentPermission,
    EnvironmentRole,
    MyPermission,
    ProjectDefault
)

__all__ = [
    # Account models
    "User",

    # Project models
    "Project",
    "ProjectWithEnvironments",
    "Environment",

    # Secret models
    "Secret",
    "SecretWithValue",
    "SecretHistory",
    "BulkSecretItem",
    "BulkImportResult",

    # Permission models
    "EnvironmentPermission",
    "EnvironmentRole",
    "MyPermission",
    "ProjectDefault"
]
