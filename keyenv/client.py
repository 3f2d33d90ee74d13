"""KeyEnv API client.

This client wraps the KeyEnv REST API: every operation builds a path and an
optional body, hands it to :class:`~keyenv.transport.Transport` and maps the
JSON result onto the typed records in :mod:`keyenv.models`. Secret exports are
optionally served from a short-lived in-memory cache which is invalidated by
every successful secret write.

Example::

    from keyenv import KeyEnv

    with KeyEnv(token="env_svc_...", cache_ttl=300) as client:
        client.load_env("proj_123", "production")
"""
from __future__ import annotations

import logging
import os
from typing import Any, Dict, Iterable, List, Mapping, MutableMapping, Optional, Tuple, Type, TypeVar, Union

import httpx
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from keyenv.cache import SecretsCache
from keyenv.exceptions import KeyEnvError, NotFoundError
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
from keyenv.transport import Transport
from keyenv.utils.config import Settings, normalize_api_url
from keyenv.utils.envelope import unwrap_list, unwrap_object
from keyenv.utils.envfile import render_env_file

logger = logging.getLogger(__name__)

__all__ = ["KeyEnv"]

API_PREFIX = "/api/v1"

Role = Union[EnvironmentRole, str]
T = TypeVar("T", bound=BaseModel)


def _role_value(role: Role) -> str:
    return role.value if isinstance(role, EnvironmentRole) else role


def _with_role_values(items: Iterable[Mapping[str, Any]], field: str) -> List[Dict[str, Any]]:
    """Copy request items, converting any EnvironmentRole in *field* to its string value."""
    converted = []
    for item in items:
        item = dict(item)
        if field in item:
            item[field] = _role_value(item[field])
        converted.append(item)
    return converted


class KeyEnv:
    """Synchronous client for the KeyEnv secrets API.

    Not safe for concurrent use from several threads: the export cache is
    unsynchronized and owned by this instance.
    """

    def __init__(
        self,
        token: str,
        *,
        timeout: Optional[float] = None,
        cache_ttl: int = 0,
        base_url: Optional[str] = None,
        http_client: Optional[httpx.Client] = None,
        settings: Optional[Settings] = None,
    ) -> None:
        """
        Initialize the KeyEnv client.

        :param token: Service or user token used as the bearer credential
        :param timeout: Request timeout in seconds (default: KEYENV_TIMEOUT or 30)
        :param cache_ttl: Export cache TTL in seconds; 0 defers to KEYENV_CACHE_TTL (default: disabled)
        :param base_url: API base URL (default: KEYENV_API_URL or https://api.keyenv.dev)
        :param http_client: Preconfigured httpx.Client, mainly for tests
        :param settings: Explicit settings instead of reading the environment
        :raises ValueError: If the token is empty
        """
        if not token:
            raise ValueError("KeyEnv token is required")

        if settings is None:
            # Explicit arguments are validated in place of the matching KEYENV_* variables
            overrides: Dict[str, Any] = {}
            if base_url is not None:
                overrides["api_url"] = base_url
            if timeout is not None:
                overrides["timeout"] = timeout
            settings = Settings(**overrides)
        self.base_url = normalize_api_url(base_url) if base_url is not None else settings.api_url
        self.timeout = timeout if timeout is not None else settings.timeout
        self.cache_ttl = cache_ttl if cache_ttl > 0 else settings.cache_ttl

        self.transport = Transport(token, base_url=self.base_url, timeout=self.timeout, http_client=http_client)
        self.cache = SecretsCache(ttl=self.cache_ttl)

    @classmethod
    def create(cls, token: str, **options: Any) -> "KeyEnv":
        """Alternate constructor taking the token positionally."""
        return cls(token, **options)

    @classmethod
    def from_env(cls, **options: Any) -> "KeyEnv":
        """
        Build a client from KEYENV_* environment variables.

        :raises ValueError: If KEYENV_TOKEN is not set
        """
        settings = options.pop("settings", None) or Settings()
        if settings.token is None:
            raise ValueError("KEYENV_TOKEN is not set")
        return cls(settings.token.get_secret_value(), settings=settings, **options)

    # ---------------------- context manager helpers ------------------------
    def __enter__(self) -> "KeyEnv":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:  # noqa: ANN001
        self.close()

    def close(self) -> None:
        """Close the underlying HTTP connection pool."""
        self.transport.close()

    def __repr__(self) -> str:
        return f"KeyEnv(base_url={self.base_url!r}, timeout={self.timeout}, cache_ttl={self.cache_ttl})"

    # ---------------------- paths ------------------------------------------
    @staticmethod
    def _project_path(project_id: str) -> str:
        return f"{API_PREFIX}/projects/{project_id}"

    @classmethod
    def _environment_path(cls, project_id: str, environment: str) -> str:
        return f"{cls._project_path(project_id)}/environments/{environment}"

    @classmethod
    def _secrets_path(cls, project_id: str, environment: str) -> str:
        return f"{cls._environment_path(project_id, environment)}/secrets"

    def _parse(self, model: Type[T], data: Any) -> T:
        """Validate one record from a successful response; a malformed record is a KeyEnvError."""
        try:
            return model.model_validate(data)
        except PydanticValidationError as exc:
            errors = [{"loc": list(e["loc"]), "msg": e["msg"], "type": e["type"]} for e in exc.errors()]
            logger.warning(
                "KeyEnv API returned a malformed record",
                extra={"log_type": "malformed_record", "model": model.__name__, "errors": errors}
            )
            raise KeyEnvError(
                f"Malformed {model.__name__} in API response",
                status=self.transport.last_status_code or 0,
                code="invalid_response",
                details={"errors": errors},
            ) from exc

    # ---------------------- authentication ---------------------------------
    def get_current_user(self) -> User:
        """Return the user or service token the client is authenticated as."""
        data = self.transport.get(f"{API_PREFIX}/users/me")
        return self._parse(User, unwrap_object(data, "user"))

    def validate_token(self) -> User:
        """Validate the token; raises AuthenticationError if it is rejected."""
        return self.get_current_user()

    # ---------------------- projects ---------------------------------------
    def list_projects(self) -> List[Project]:
        data = self.transport.get(f"{API_PREFIX}/projects")
        return [self._parse(Project, p) for p in unwrap_list(data, "projects")]

    def get_project(self, project_id: str) -> ProjectWithEnvironments:
        """Return a project together with its environments."""
        data = self.transport.get(self._project_path(project_id))
        return self._parse(ProjectWithEnvironments, unwrap_object(data, "project"))

    def create_project(self, team_id: str, name: str) -> Project:
        data = self.transport.post(f"{API_PREFIX}/projects", {"team_id": team_id, "name": name})
        return self._parse(Project, unwrap_object(data, "project"))

    def delete_project(self, project_id: str) -> None:
        self.transport.delete(self._project_path(project_id))
        self.cache.invalidate(project_id=project_id)

    # ---------------------- environments -----------------------------------
    def list_environments(self, project_id: str) -> List[Environment]:
        data = self.transport.get(f"{self._project_path(project_id)}/environments")
        return [self._parse(Environment, e) for e in unwrap_list(data, "environments")]

    def create_environment(self, project_id: str, name: str, inherits_from: Optional[str] = None) -> Environment:
        """
        Create an environment in a project.

        :param inherits_from: Optional parent environment whose secrets are inherited
        """
        payload: Dict[str, Any] = {"name": name}
        if inherits_from:
            payload["inherits_from"] = inherits_from
        data = self.transport.post(f"{self._project_path(project_id)}/environments", payload)
        return self._parse(Environment, unwrap_object(data, "environment"))

    def delete_environment(self, project_id: str, environment: str) -> None:
        self.transport.delete(self._environment_path(project_id, environment))
        self.cache.invalidate(project_id=project_id, environment=environment)

    # ---------------------- secrets ----------------------------------------
    def list_secrets(self, project_id: str, environment: str) -> List[Secret]:
        """List secret keys and metadata; values are not included."""
        data = self.transport.get(self._secrets_path(project_id, environment))
        return [self._parse(Secret, s) for s in unwrap_list(data, "secrets")]

    def export_secrets(self, project_id: str, environment: str) -> List[SecretWithValue]:
        """
        Export all secrets of an environment with their decrypted values.
        Served from the cache while a live entry exists and cache_ttl > 0.
        """
        cached = self.cache.get(project_id, environment)
        if cached is not None:
            return cached

        data = self.transport.get(f"{self._secrets_path(project_id, environment)}/export")
        secrets = [self._parse(SecretWithValue, s) for s in unwrap_list(data, "secrets")]
        self.cache.set(project_id, environment, secrets)
        return secrets

    def export_secrets_as_dict(self, project_id: str, environment: str) -> Dict[str, str]:
        """Export secrets as a ``{key: value}`` mapping."""
        return {s.key: s.value for s in self.export_secrets(project_id, environment)}

    def get_secret(self, project_id: str, environment: str, key: str) -> SecretWithValue:
        data = self.transport.get(f"{self._secrets_path(project_id, environment)}/{key}")
        return self._parse(SecretWithValue, unwrap_object(data, "secret"))

    def create_secret(
        self,
        project_id: str,
        environment: str,
        key: str,
        value: str,
        description: Optional[str] = None,
    ) -> Secret:
        payload: Dict[str, Any] = {"key": key, "value": value}
        if description:
            payload["description"] = description
        data = self.transport.post(self._secrets_path(project_id, environment), payload)
        self.cache.invalidate(project_id=project_id, environment=environment)
        return self._parse(Secret, unwrap_object(data, "secret"))

    def update_secret(
        self,
        project_id: str,
        environment: str,
        key: str,
        value: str,
        description: Optional[str] = None,
    ) -> Secret:
        """Update a secret's value; a description of None leaves it unchanged."""
        payload: Dict[str, Any] = {"value": value}
        if description is not None:
            payload["description"] = description
        data = self.transport.put(f"{self._secrets_path(project_id, environment)}/{key}", payload)
        self.cache.invalidate(project_id=project_id, environment=environment)
        return self._parse(Secret, unwrap_object(data, "secret"))

    def set_secret(
        self,
        project_id: str,
        environment: str,
        key: str,
        value: str,
        description: Optional[str] = None,
    ) -> Secret:
        """Update a secret, creating it if the update reports NotFound."""
        try:
            return self.update_secret(project_id, environment, key, value, description=description)
        except NotFoundError:
            logger.debug(
                "Secret not found, creating it",
                extra={"log_type": "set_secret_create", "project_id": project_id, "environment": environment, "key": key}
            )
            return self.create_secret(project_id, environment, key, value, description=description)

    def delete_secret(self, project_id: str, environment: str, key: str) -> None:
        self.transport.delete(f"{self._secrets_path(project_id, environment)}/{key}")
        self.cache.invalidate(project_id=project_id, environment=environment)

    def get_secret_history(self, project_id: str, environment: str, key: str) -> List[SecretHistory]:
        data = self.transport.get(f"{self._secrets_path(project_id, environment)}/{key}/history")
        return [self._parse(SecretHistory, h) for h in unwrap_list(data, "history")]

    def bulk_import(
        self,
        project_id: str,
        environment: str,
        secrets: Iterable[Union[BulkSecretItem, Mapping[str, Any]]],
        overwrite: bool = False,
    ) -> BulkImportResult:
        """
        Import many secrets in one request.

        :param secrets: BulkSecretItem instances or ``{"key": ..., "value": ...}`` mappings
        :param overwrite: Overwrite secrets that already exist instead of skipping them
        """
        items = [s.to_dict() if isinstance(s, BulkSecretItem) else dict(s) for s in secrets]
        data = self.transport.post(
            f"{self._secrets_path(project_id, environment)}/bulk",
            {"secrets": items, "overwrite": overwrite},
        )
        self.cache.invalidate(project_id=project_id, environment=environment)
        return self._parse(BulkImportResult, unwrap_object(data, "result"))

    # ---------------------- utilities --------------------------------------
    def load_env(
        self,
        project_id: str,
        environment: str,
        environ: Optional[MutableMapping[str, str]] = None,
    ) -> int:
        """
        Export secrets into an environment mapping.

        :param environ: Target mapping (default: os.environ)
        :return: Number of variables written
        """
        target = os.environ if environ is None else environ
        secrets = self.export_secrets(project_id, environment)
        for secret in secrets:
            target[secret.key] = secret.value
        logger.info(
            "Loaded secrets into environment",
            extra={"log_type": "load_env", "project_id": project_id, "environment": environment, "count": len(secrets)}
        )
        return len(secrets)

    def generate_env_file(self, project_id: str, environment: str) -> str:
        """Return ``.env`` file content for an environment's secrets."""
        return render_env_file(self.export_secrets(project_id, environment), environment)

    def clear_cache(self, project_id: Optional[str] = None, environment: Optional[str] = None) -> None:
        """
        Clear cached exports.

        :param project_id: Clear only this project's environments
        :param environment: Clear only this environment (requires project_id)
        """
        self.cache.invalidate(project_id=project_id, environment=environment)

    # ---------------------- environment permissions ------------------------
    def list_permissions(self, project_id: str, environment: str) -> List[EnvironmentPermission]:
        data = self.transport.get(f"{self._environment_path(project_id, environment)}/permissions")
        return [self._parse(EnvironmentPermission, p) for p in unwrap_list(data, "permissions")]

    def set_permission(self, project_id: str, environment: str, user_id: str, role: Role) -> EnvironmentPermission:
        """Grant *role* (none, read, write or admin) to a user on an environment."""
        data = self.transport.put(
            f"{self._environment_path(project_id, environment)}/permissions/{user_id}",
            {"role": _role_value(role)},
        )
        return self._parse(EnvironmentPermission, unwrap_object(data, "permission"))

    def delete_permission(self, project_id: str, environment: str, user_id: str) -> None:
        self.transport.delete(f"{self._environment_path(project_id, environment)}/permissions/{user_id}")

    def bulk_set_permissions(
        self,
        project_id: str,
        environment: str,
        permissions: Iterable[Mapping[str, Any]],
    ) -> List[EnvironmentPermission]:
        """
        Set several users' roles at once.

        :param permissions: Mappings with "user_id" and "role" keys
        """
        data = self.transport.put(
            f"{self._environment_path(project_id, environment)}/permissions",
            {"permissions": _with_role_values(permissions, "role")},
        )
        return [self._parse(EnvironmentPermission, p) for p in unwrap_list(data, "permissions")]

    def get_my_permissions(self, project_id: str) -> Tuple[List[MyPermission], bool]:
        """Return the caller's permissions on every environment and whether they are a team admin."""
        data = unwrap_object(self.transport.get(f"{self._project_path(project_id)}/my-permissions"))
        permissions = [self._parse(MyPermission, p) for p in unwrap_list(data, "permissions")]
        return permissions, bool(data.get("is_team_admin", False))

    def get_project_defaults(self, project_id: str) -> List[ProjectDefault]:
        data = self.transport.get(f"{self._project_path(project_id)}/permissions/defaults")
        return [self._parse(ProjectDefault, d) for d in unwrap_list(data, "defaults")]

    def set_project_defaults(self, project_id: str, defaults: Iterable[Mapping[str, Any]]) -> List[ProjectDefault]:
        """
        Replace a project's default roles.

        :param defaults: Mappings with "environment_name" and "default_role" keys
        """
        data = self.transport.put(
            f"{self._project_path(project_id)}/permissions/defaults",
            {"defaults": _with_role_values(defaults, "default_role")},
        )
        return [self._parse(ProjectDefault, d) for d in unwrap_list(data, "defaults")]
