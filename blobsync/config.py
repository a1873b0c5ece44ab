"""Account configuration loading."""

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Union

from .exceptions import ConfigLoadError

logger = logging.getLogger(__name__)

ACCOUNT_KEY_ENV_VAR = "BLOBSYNC_ACCOUNT_KEY"

# JSON field name -> AccountCredentials attribute
_REQUIRED_FIELDS = {
    "accountName": "account_name",
    "accountKey": "account_key",
    "containerName": "container_name",
}


@dataclass(frozen=True)
class AccountCredentials:
    """Credentials and addressing for one remote container.

    Loaded once at startup and never written back to disk.
    """

    account_name: str
    """Storage account name"""

    account_key: str = field(repr=False)
    """Shared account key (hidden from repr)"""

    container_name: str
    """Container to synchronize into"""

    endpoint: Optional[str] = None
    """Blob service URL override (e.g. an emulator)"""

    @property
    def account_url(self) -> str:
        """Blob service URL for this account."""
        if self.endpoint:
            return self.endpoint.rstrip("/")
        return f"https://{self.account_name}.blob.core.windows.net"


def load_account_config(path: Union[str, Path]) -> AccountCredentials:
    """Load account credentials from a JSON config file.

    The file holds ``accountName``, ``accountKey`` and ``containerName``
    and may hold an ``endpoint``. If the ``BLOBSYNC_ACCOUNT_KEY``
    environment variable is set it takes precedence over ``accountKey``.

    Args:
        path: Path to the JSON config file

    Returns:
        AccountCredentials instance

    Raises:
        ConfigLoadError: If the file cannot be read or is malformed
    """
    config_path = Path(path)
    try:
        with open(config_path, encoding="utf-8") as f:
            data = json.load(f)
    except OSError as e:
        raise ConfigLoadError(f"Cannot read config file {config_path}: {e}") from e
    except json.JSONDecodeError as e:
        raise ConfigLoadError(f"Invalid JSON in config file {config_path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigLoadError(
            f"Config file {config_path} must contain a JSON object, "
            f"got {type(data).__name__}"
        )

    env_key = os.environ.get(ACCOUNT_KEY_ENV_VAR)
    if env_key:
        logger.debug("Using account key from %s", ACCOUNT_KEY_ENV_VAR)
        data = {**data, "accountKey": env_key}

    values: dict[str, str] = {}
    for json_name, attr in _REQUIRED_FIELDS.items():
        value = data.get(json_name)
        if not isinstance(value, str) or not value.strip():
            raise ConfigLoadError(
                f"Config file {config_path} is missing required field '{json_name}'"
            )
        values[attr] = value.strip()

    endpoint = data.get("endpoint")
    if endpoint is not None and not isinstance(endpoint, str):
        raise ConfigLoadError(
            f"Config file {config_path} has a non-string 'endpoint' field"
        )

    return AccountCredentials(endpoint=endpoint or None, **values)
