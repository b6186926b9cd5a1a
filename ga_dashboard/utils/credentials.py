"""Load the GA4 service account from the environment or from disk.

On Vercel / Render style hosts the credential JSON can't be committed, so
it is pasted into an env var instead:

    GOOGLE_CREDENTIALS     → raw service account JSON (preferred)
    GA4_CREDENTIALS_PATH   → path to the JSON file (default ./credentials.json)

If GA4_CREDENTIALS_PATH itself holds JSON content it is used directly.
"""
import json
import os
from typing import Any, Dict

from ga_dashboard.config import Settings
from ga_dashboard.utils.logger import log


class CredentialsError(Exception):
    """Raised when no usable service account could be loaded."""


def _is_json(value: str) -> bool:
    """Check if a string looks like JSON content (not a file path)."""
    stripped = value.strip()
    return stripped.startswith("{") and stripped.endswith("}")


def load_service_account_info(settings: Settings) -> Dict[str, Any]:
    """Return the service account dict, checking the env var then the file."""
    for source, value in (
        ("GOOGLE_CREDENTIALS", settings.google_credentials or ""),
        ("GA4_CREDENTIALS_PATH", settings.ga4_credentials_path or ""),
    ):
        if value and _is_json(value):
            try:
                info = json.loads(value)
            except json.JSONDecodeError as e:
                raise CredentialsError(f"{source} is not valid JSON: {e}") from e
            log.info(f"Loaded GA4 credentials from {source}")
            return info

    path = settings.ga4_credentials_path
    if not path or not os.path.exists(path):
        raise CredentialsError(f"Credentials file not found: {path}")

    try:
        with open(path) as f:
            info = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise CredentialsError(f"Failed to read {path}: {e}") from e

    log.info(f"Loaded GA4 credentials from {path}")
    return info
