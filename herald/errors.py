"""Exceptions raised by Herald."""

from typing import Optional


class HeraldError(Exception):
    """Base class for all Herald errors."""


class ReleaseNotFoundError(HeraldError):
    """No release matches the requested version."""

    def __init__(self, version: Optional[str]):
        self.version = version
        super().__init__(f"Couldn't find the release '{version}' among the supplied releases.")


class AnnouncementError(HeraldError):
    """Announcement generation failed."""


class TemplateNotFoundError(AnnouncementError):
    """The announcement template could not be located."""


class JiraError(HeraldError):
    """Downloading or reading JIRA issues failed."""


class ChangesXMLError(HeraldError):
    """A changes.xml file could not be read."""


class ProjectError(HeraldError):
    """A pom.xml file could not be read."""


class ResourcesError(HeraldError):
    """Copying resources failed."""
