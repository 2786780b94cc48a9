"""Credential redaction for debug dumps.

Before any request or response is written to *stderr* the :func:`redact`
function is applied:

* Values under sensitive keys (``Authorization``, ``api_token`` ...) are
  masked, showing at most the last four characters of the known token.
* ``Basic`` / ``Bearer`` credentials are masked wherever they appear.
* The full API token is scrubbed from every string in the tree.
* Raw bytes (attachment uploads and downloads) are replaced with
  ``<binary:N_bytes>``.
"""

from __future__ import annotations

import copy
import re
from typing import Any

# If any of these appear in a key name (case-insensitive) the value is masked.
_SENSITIVE_KEY_PATTERNS: frozenset[str] = frozenset({
    "token",
    "secret",
    "password",
    "credential",
    "authorization",
    "cookie",
    "api_key",
    "api-key",
})

_AUTH_SCHEME_RE = re.compile(r"\b(Basic|Bearer)\s+\S+")

# A string longer than this that is mostly non-printable is treated as binary.
_BINARY_LENGTH_THRESHOLD = 256


def _mask_token(value: str, token: str | None) -> str:
    """Replace credential strings with a safe placeholder."""
    if token and token in value:
        suffix = token[-4:] if len(token) >= 4 else "****"
        placeholder = f"<redacted:...{suffix}>"
        if token in placeholder:
            placeholder = "<redacted>"
        value = value.replace(token, placeholder)
    return _AUTH_SCHEME_RE.sub(lambda m: f"{m.group(1)} <redacted>", value)


def _looks_binary(value: str) -> bool:
    if len(value) < _BINARY_LENGTH_THRESHOLD:
        return False
    non_printable = sum(
        1
        for ch in value[:512]
        if not ch.isprintable() and ch not in ("\n", "\r", "\t")
    )
    return non_printable > len(value[:512]) * 0.1


def _redact_value(value: Any, token: str | None) -> Any:
    if isinstance(value, dict):
        return _redact_dict(value, token)
    if isinstance(value, (list, tuple)):
        return [_redact_value(item, token) for item in value]
    if isinstance(value, str):
        if _looks_binary(value):
            return f"<binary:{len(value.encode('utf-8'))}_bytes>"
        return _mask_token(value, token)
    if isinstance(value, (bytes, bytearray)):
        return f"<binary:{len(value)}_bytes>"
    return value


def _redact_dict(d: dict, token: str | None) -> dict:
    result: dict = {}
    for key, value in d.items():
        key_lower = key.lower() if isinstance(key, str) else ""
        if any(pat in key_lower for pat in _SENSITIVE_KEY_PATTERNS):
            if isinstance(value, str):
                result[key] = _mask_token(value, token)
                if result[key] == value:
                    result[key] = "<redacted>"
            else:
                result[key] = "<redacted>"
        else:
            result[key] = _redact_value(value, token)
    return result


def redact(payload: dict, token: str | None = None) -> dict:
    """Return a deep copy of *payload* with credentials and blobs removed.

    Parameters
    ----------
    payload:
        The dictionary to sanitize (request body, headers, debug dump).
    token:
        The Jira API token.  If supplied, every occurrence is replaced.

    Examples
    --------
    >>> redact({"Authorization": "Basic dXNlcjp0b2tlbg=="})
    {'Authorization': 'Basic <redacted>'}
    """
    safe = copy.deepcopy(payload)
    return _redact_dict(safe, token)
