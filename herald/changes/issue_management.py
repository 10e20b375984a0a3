"""Issue management checks done before talking to JIRA."""

import enum
import logging
from typing import Optional

from .model import IssueManagement


class IssueManagementStatus(enum.Enum):
    """Outcome of :func:`check_issue_management`."""

    OK = ""
    NOT_CONFIGURED = "No Issue Management set. No JIRA announcement will be made."
    NO_URL = "No URL set in Issue Management. No JIRA announcement will be made."
    UNSUPPORTED_SYSTEM = "No JIRA Issue Management system configured. No JIRA announcement will be made."

    @property
    def message(self) -> str:
        return self.value

    def __bool__(self) -> bool:
        return self is IssueManagementStatus.OK


def check_issue_management(issue_management: Optional[IssueManagement]) -> IssueManagementStatus:
    """Check that the issue management section points at a JIRA instance.

    A missing system name is accepted; a declared one must be ``jira``
    (any case).
    """
    if issue_management is None:
        return IssueManagementStatus.NOT_CONFIGURED
    if issue_management.url is None or not issue_management.url.strip():
        return IssueManagementStatus.NO_URL
    if issue_management.system is not None and issue_management.system.lower() != "jira":
        return IssueManagementStatus.UNSUPPORTED_SYSTEM
    return IssueManagementStatus.OK


def validate_issue_management(issue_management: Optional[IssueManagement],
                              logger: Optional[logging.Logger] = None) -> bool:
    """Check the issue management section and log the reason it is unusable.

    Returns:
        True if a JIRA download can be attempted
    """
    logger = logger or logging.getLogger(__name__)
    status = check_issue_management(issue_management)
    if not status:
        logger.error(status.message)
        return False
    return True
