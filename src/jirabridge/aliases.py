"""Pod alias expansion for JQL queries.

Users can write ``Pod = "growth"`` instead of the full ``Pod = "Pod 2 Growth"``.
Every ``Pod = "<x>"`` / ``pod='<x>'`` clause whose value is a known alias is
rewritten to the canonical double-quoted form; unknown values are left
exactly as written.
"""

from __future__ import annotations

import re
from collections.abc import Mapping

from jirabridge.config import DEFAULT_POD_ALIASES

_POD_CLAUSE_RE = re.compile(r"""Pod\s*=\s*["']([^"']+)["']""", re.IGNORECASE)


def resolve_pod_alias(name: str, aliases: Mapping[str, str] | None = None) -> str | None:
    """Return the full pod name for *name*, or ``None`` if it is not an alias."""
    table = DEFAULT_POD_ALIASES if aliases is None else aliases
    return table.get(name.lower().strip())


def expand_pod_aliases(jql: str, aliases: Mapping[str, str] | None = None) -> str:
    """Rewrite pod aliases in *jql* to their full names.

    Parameters
    ----------
    jql:
        The query as supplied by the caller.
    aliases:
        Lower-case alias table.  Defaults to
        :data:`~jirabridge.config.DEFAULT_POD_ALIASES`.

    Examples
    --------
    >>> expand_pod_aliases("Pod = 'workflow' AND status = Open")
    'Pod = "Pod 1 Workflow" AND status = Open'
    """

    def _replace(match: re.Match[str]) -> str:
        full = resolve_pod_alias(match.group(1), aliases)
        if full is None:
            return match.group(0)
        return f'Pod = "{full}"'

    return _POD_CLAUSE_RE.sub(_replace, jql)
