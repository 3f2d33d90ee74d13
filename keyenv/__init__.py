"""KeyEnv Python client - secure secrets management for development teams."""

import logging

from keyenv.cache import SecretsCache
from keyenv.client import KeyEnv
from keyenv.exceptions import (
    AuthenticationError,
    KeyEnvConnectionError,
    KeyEnvError,
    KeyEnvTimeoutError,
    NotFoundError,
    RateLimitError,
    ValidationError,
)
from keyenv.models import (
    BulkImportResult,
    BulkSecretItem,
    Environment,
    EnvironmentPermission,
    EnvironmentRole,
    MyPermission,
    Project,
    ProjectDefault,
    ProjectWithEnvironments,
    Secret,
    SecretHistory,
    SecretWithValue,
    User,
)
from keyenv.version import __version__

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "__version__",
    # Client
    "KeyEnv",
    "SecretsCache",

    # Errors
    "KeyEnvError",
    "AuthenticationError",
    "NotFoundError",
    "ValidationError",
    "RateLimitError",
    "KeyEnvConnectionError",
    "KeyEnvTimeoutError",

    # Records
    "User",
    "Project",
    "ProjectWithEnvironments",
    "Environment",
    "Secret",
    "SecretWithValue",
    "SecretHistory",
    "BulkSecretItem",
    "BulkImportResult",
    "EnvironmentPermission",
    "EnvironmentRole",
    "MyPermission",
    "ProjectDefault",
]
