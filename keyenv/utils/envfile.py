"""Rendering of ``.env`` file content from exported secrets."""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Iterable, Optional

from keyenv.models.secrets import SecretWithValue

# Any of these in a value forces double quoting.
QUOTE_TRIGGERS = ("\n", '"', "'", " ", "$")


def needs_quoting(value: str) -> bool:
    return any(ch in value for ch in QUOTE_TRIGGERS)


def escape_value(value: str) -> str:
    """Escape a value for use inside double quotes. Backslashes go first."""
    return (
        value.replace("\\", "\\\\")
        .replace('"', '\\"')
        .replace("\n", "\\n")
        .replace("$", "\\$")
    )


def format_env_line(key: str, value: str) -> str:
    """Render one ``KEY=value`` line, quoting the value only when required."""
    if needs_quoting(value):
        return f'{key}="{escape_value(value)}"'
    return f"{key}={value}"


def render_env_file(
    secrets: Iterable[SecretWithValue],
    environment: str,
    generated_at: Optional[datetime] = None,
) -> str:
    """
    Render ``.env`` content for *secrets* with a generated header block.

    :param secrets: Exported secrets, rendered in iteration order
    :param environment: Environment name shown in the header
    :param generated_at: Header timestamp; defaults to now (UTC)
    :return: File content, always ending with a newline
    """
    generated_at = generated_at or datetime.now(timezone.utc)
    lines = [
        "# Generated by KeyEnv",
        f"# Environment: {environment}",
        f"# Generated at: {generated_at.astimezone(timezone.utc).strftime('%Y-%m-%dT%H:%M:%SZ')}",
        "",
    ]
    lines.extend(format_env_line(secret.key, secret.value) for secret in secrets)
    return "\n".join(lines) + "\n"
