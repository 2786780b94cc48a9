"""jirabridge.jira_api -- Jira REST transport and endpoint wrappers.

* :mod:`.rate_limit` -- token bucket request pacing.
* :mod:`.retries` -- retry decisions and exponential backoff.
* :mod:`.transport` -- HTTP transport with auth, retries, and rate limiting.
* :mod:`.issues` -- issue, comment and search wrappers.
* :mod:`.attachments` -- attachment upload / download wrappers.
"""

from __future__ import annotations

from .attachments import AttachmentAPI
from .issues import IssueAPI
from .rate_limit import TokenBucket
from .retries import compute_backoff, should_retry
from .transport import JiraTransport

__all__ = [
    "AttachmentAPI",
    "IssueAPI",
    "JiraTransport",
    "TokenBucket",
    "compute_backoff",
    "should_retry",
]
