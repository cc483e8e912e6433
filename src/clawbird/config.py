"""Credential resolution — explicit plugin config with environment fallback.

Per field, any value present in the explicit config wins, even an empty
string; only an absent or None key falls back to the matching X_* environment
variable. The four OAuth 1.0a fields are required; the bearer token is
optional and only changes which client reads go through.

The environment serves as the secrets store. Nothing here logs credential
values — only the names of missing variables.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from typing import Any

from clawbird.errors import ConfigurationError
from clawbird.models import CredentialSet

ENV_KEYS: dict[str, str] = {
    "api_key": "X_API_KEY",
    "api_secret": "X_API_SECRET",
    "access_token": "X_ACCESS_TOKEN",
    "access_token_secret": "X_ACCESS_SECRET",
    "bearer_token": "X_BEARER_TOKEN",
}

REQUIRED_FIELDS = ("api_key", "api_secret", "access_token", "access_token_secret")

# Host plugin manifests spell config keys in camelCase.
CONFIG_ALIASES: dict[str, str] = {
    "api_key": "apiKey",
    "api_secret": "apiSecret",
    "access_token": "accessToken",
    "access_token_secret": "accessTokenSecret",
    "bearer_token": "bearerToken",
}


def resolve_credentials(explicit: Mapping[str, Any] | None = None) -> CredentialSet:
    """Merge explicit config over environment variables into a CredentialSet.

    Raises:
        ConfigurationError: Any of the four required fields is empty after
            the merge. The message names all four environment variables.
    """
    explicit = explicit or {}
    values: dict[str, str] = {}
    for field_name, env_var in ENV_KEYS.items():
        value = explicit.get(field_name)
        if value is None:
            value = explicit.get(CONFIG_ALIASES[field_name])
        if value is None:
            value = os.environ.get(env_var, "")
        values[field_name] = str(value)

    if not all(values[name] for name in REQUIRED_FIELDS):
        required_vars = ", ".join(ENV_KEYS[name] for name in REQUIRED_FIELDS)
        raise ConfigurationError(
            "Missing required X API credentials. Set them in the plugin config "
            f"or via environment variables: {required_vars}"
        )

    return CredentialSet(
        api_key=values["api_key"],
        api_secret=values["api_secret"],
        access_token=values["access_token"],
        access_token_secret=values["access_token_secret"],
        bearer_token=values["bearer_token"] or None,
    )
