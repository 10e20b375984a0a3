"""Reader for the JIRA XML search view and conversion to releases."""

import logging
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Union

from dateutil import parser as date_parser

from ..changes.model import Action, Release
from ..errors import JiraError


# Mapping of JIRA issue types to changes.xml action types
ACTION_TYPES = {
    "Bug": "fix",
    "New Feature": "add",
    "Improvement": "update",
}


@dataclass
class JiraIssue:
    """One ``<item>`` of the JIRA XML view."""
    key: str
    summary: Optional[str] = None
    type: Optional[str] = None
    status: Optional[str] = None
    resolution: Optional[str] = None
    assignee: Optional[str] = None
    reporter: Optional[str] = None
    link: Optional[str] = None
    created: Optional[datetime] = None
    fix_versions: List[str] = field(default_factory=list)


def _text(el, tag) -> Optional[str]:
    child = el.find(tag)
    if child is not None and child.text and child.text.strip():
        return child.text.strip()
    return None


def _parse_date(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    try:
        return date_parser.parse(value)
    except (ValueError, OverflowError):
        return None


def parse_jira_xml(path: Union[str, Path],
                   logger: Optional[logging.Logger] = None) -> List[JiraIssue]:
    """Parse a downloaded JIRA XML file into issues, in document order.

    Raises:
        JiraError: If the file can't be read or parsed
    """
    logger = logger or logging.getLogger(__name__)
    try:
        root = ET.parse(str(path)).getroot()
    except (OSError, ET.ParseError) as e:
        raise JiraError(f"Failed to parse JIRA XML {path}: {e}") from e

    issues = []
    for item in root.iter("item"):
        key = _text(item, "key")
        if not key:
            continue
        issues.append(JiraIssue(
            key=key,
            summary=_text(item, "summary"),
            type=_text(item, "type"),
            status=_text(item, "status"),
            resolution=_text(item, "resolution"),
            assignee=_text(item, "assignee"),
            reporter=_text(item, "reporter"),
            link=_text(item, "link"),
            created=_parse_date(_text(item, "created")),
            fix_versions=[v.text.strip() for v in item.findall("fixVersion") if v.text and v.text.strip()],
        ))

    logger.debug(f"Found {len(issues)} issues in {path}")
    return issues


def issue_to_action(issue: JiraIssue) -> Action:
    """Create the changes action describing an issue."""
    return Action(
        type=ACTION_TYPES.get(issue.type or "", ""),
        issue=issue.key,
        action=issue.summary,
        dev=issue.assignee,
    )


def jira_releases(issues: List[JiraIssue]) -> List[Release]:
    """Group issues into releases by fix version.

    Releases are ordered by the first issue that mentions their version.
    An issue with several fix versions appears in each of them; issues
    without a fix version are left out.
    """
    actions_by_version = {}
    for issue in issues:
        for version in issue.fix_versions:
            actions_by_version.setdefault(version, []).append(issue_to_action(issue))

    return [
        Release(version=version, actions=tuple(actions))
        for version, actions in actions_by_version.items()
    ]
