"""Release data: model, sources, reconciliation and selection."""

from .model import Action, Release, IssueManagement
from .releases import (
    SNAPSHOT_SUFFIX,
    normalize_version,
    get_release,
    get_latest_release,
    merge_releases,
)
from .issue_management import (
    IssueManagementStatus,
    check_issue_management,
    validate_issue_management,
)
from .changes_xml import parse_changes_xml

__all__ = [
    "Action",
    "Release",
    "IssueManagement",
    "SNAPSHOT_SUFFIX",
    "normalize_version",
    "get_release",
    "get_latest_release",
    "merge_releases",
    "IssueManagementStatus",
    "check_issue_management",
    "validate_issue_management",
    "parse_changes_xml",
]
