"""Platform constants and credential-file loading.

This module handles the small amount of configuration tdxproxy needs:

* **Platform defaults** -- host, base path, and token endpoint of the TDX
  platform, plus the default per-call timeout.
* **Credential files** -- :func:`load_credentials` reads a JSON file of the
  form ``{"app_id": "...", "app_key": "..."}``. The path comes from an
  explicit argument or, failing that, the ``TDX_CREDENTIALS_FILE``
  environment variable.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import TYPE_CHECKING, Optional

from tdxproxy.exceptions import ConstructionError

if TYPE_CHECKING:
    from tdxproxy.models import ClientIdentity

TDX_HOST = "https://tdx.transportdata.tw"
DEFAULT_BASE_PATH = "/api/basic/"
TDX_AUTH_PATH = "/auth/realms/TDXConnect/protocol/openid-connect/token"
DEFAULT_TIMEOUT = 10.0

CREDENTIALS_ENV_VAR = "TDX_CREDENTIALS_FILE"

ANONYMOUS_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/80.0.3987.122 Safari/537.36"
)
"""Browser User-Agent sent in anonymous mode (20 requests per day)."""


def resolve_credentials_path(file_name: Optional[str] = None) -> Path:
    """Return the credential file path from *file_name* or ``$TDX_CREDENTIALS_FILE``.

    Raises:
        ConstructionError: If neither is set.
    """
    if not file_name:
        file_name = os.environ.get(CREDENTIALS_ENV_VAR, "")
    if not file_name:
        raise ConstructionError(
            f"No credential file specified and {CREDENTIALS_ENV_VAR} "
            "environment variable is not set"
        )
    return Path(file_name).expanduser()


def load_credentials(file_name: Optional[str] = None) -> ClientIdentity:
    """Load a :class:`~tdxproxy.models.ClientIdentity` from a JSON credential file.

    Args:
        file_name: Path to the credential file. When empty or ``None`` the
            ``TDX_CREDENTIALS_FILE`` environment variable is used.

    Returns:
        The identity read from the file.

    Raises:
        ConstructionError: If no path is configured, the file cannot be read,
            or its content is not a JSON object with string ``app_id`` and
            ``app_key`` fields.
    """
    from tdxproxy.models import ClientIdentity, CredentialFile

    path = resolve_credentials_path(file_name)
    if not path.is_file():
        raise ConstructionError(f"Credential file not found: {path}")
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        credentials = CredentialFile.model_validate(data)
    except OSError as exc:
        raise ConstructionError(f"Cannot read credential file {path}: {exc}") from exc
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConstructionError(f"Invalid credential file at {path}: {exc}") from exc

    return ClientIdentity(app_id=credentials.app_id, app_key=credentials.app_key)
