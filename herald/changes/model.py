"""Release data model.

Immutable records shared by the changes.xml reader, the JIRA source and the
announcement generator.
"""

from dataclasses import dataclass
from typing import Optional, Tuple


@dataclass(frozen=True)
class Action:
    """One recorded change inside a release.

    Attributes:
        type: Change kind such as ``add``, ``fix``, ``update`` or ``remove``.
        issue: Issue tracker reference (e.g. ``MCHANGES-42``).
        action: Free-text description of the change.
        due_to: Name of the contributor to thank.
        due_to_email: Contributor e-mail address.
        dev: Committer who applied the change.
    """
    type: Optional[str] = None
    issue: Optional[str] = None
    action: Optional[str] = None
    due_to: Optional[str] = None
    due_to_email: Optional[str] = None
    dev: Optional[str] = None


@dataclass(frozen=True)
class Release:
    """A named version plus the actions recorded for it.

    ``version`` is the join key between release sources and is compared
    as an exact string.
    """
    version: Optional[str]
    date_release: Optional[str] = None
    description: Optional[str] = None
    actions: Tuple[Action, ...] = ()


@dataclass(frozen=True)
class IssueManagement:
    """The ``<issueManagement>`` section of a project."""
    system: Optional[str] = None
    url: Optional[str] = None
