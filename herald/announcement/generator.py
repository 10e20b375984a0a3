"""Announcement generation logic."""

import locale
import logging
from pathlib import Path
from string import Template
from typing import Dict, List, Optional, Sequence

from ..changes import (
    Action,
    Release,
    get_latest_release,
    merge_releases,
    parse_changes_xml,
    validate_issue_management,
)
from ..config import Config
from ..errors import AnnouncementError, HeraldError, TemplateNotFoundError
from ..jira import JiraDownloader, jira_releases, parse_jira_xml
from ..project import MavenProject


BUNDLED_TEMPLATE_DIRECTORY = Path(__file__).parent / "templates"

ACTION_TEMPLATE = Template("o $action$issue$due_to")

# Section headers in output order, keyed by action type
SECTIONS = [
    ("add", "New features:"),
    ("fix", "Fixed Bugs:"),
    ("update", "Changes:"),
    ("remove", "Removed:"),
]

NO_CHANGES = "No changes defined in this version."


def group_actions(actions: Sequence[Action]) -> Dict[str, List[Action]]:
    """Group actions by section, listing unknown or missing types under update."""
    known = {kind for kind, _ in SECTIONS}
    grouped: Dict[str, List[Action]] = {kind: [] for kind, _ in SECTIONS}
    for action in actions:
        grouped[action.type if action.type in known else "update"].append(action)
    return grouped


def render_actions(actions: Sequence[Action]) -> str:
    """Render actions as ``o`` bullet lines."""
    lines = []
    for action in actions:
        lines.append(ACTION_TEMPLATE.substitute(
            action=action.action or "",
            issue=f" Issue: {action.issue}." if action.issue else "",
            due_to=f" Thanks to {action.due_to}." if action.due_to else "",
        ))
    return "\n".join(lines)


def render_release_changes(release: Release) -> str:
    """Render the changes of a release grouped by action type.

    Actions with a type outside of add/fix/update/remove are listed
    under changes.
    """
    if not release.actions:
        return NO_CHANGES + "\n"

    grouped = group_actions(release.actions)
    sections = ["Changes in this version include:\n"]
    for kind, title in SECTIONS:
        if grouped[kind]:
            sections.append(f"{title}\n{render_actions(grouped[kind])}\n")
    return "\n".join(sections)


def render_template(template_text: str, context: Dict[str, str]) -> str:
    """Substitute ``$name`` placeholders; unknown placeholders are kept."""
    return Template(template_text).safe_substitute(context)


class AnnouncementGenerator:
    """Builds the announcement for a project from its release sources."""

    def __init__(self, config: Config, project: MavenProject,
                 logger: Optional[logging.Logger] = None,
                 downloader: Optional[JiraDownloader] = None):
        """Initialize the generator.

        Args:
            config: Announcement and JIRA settings
            project: Project the announcement is for
            logger: Logger instance
            downloader: JIRA downloader, created from config if not given
        """
        self.config = config
        self.project = project
        self.logger = logger or logging.getLogger(__name__)
        self._downloader = downloader

    # Derived parameters

    def _path(self, value: str) -> Path:
        path = Path(value).expanduser()
        return path if path.is_absolute() else self.project.basedir / path

    @property
    def xml_path(self) -> Path:
        return self._path(self.config.xml_path)

    @property
    def output_directory(self) -> Path:
        return self._path(self.config.output_directory)

    @property
    def version(self) -> Optional[str]:
        return self.config.version or self.project.version

    @property
    def final_name(self) -> Optional[str]:
        return self.config.final_name or self.project.final_name

    @property
    def development_team(self) -> str:
        if self.config.development_team:
            return self.project.resolve(self.config.development_team)
        return f"{self.project.name or self.project.artifact_id} team"

    @property
    def introduction(self) -> str:
        introduction = self.config.introduction or self.project.description
        # Fall back to the project URL when no introduction is available
        return introduction or self.project.url or ""

    # Execution

    def execute(self) -> Optional[Path]:
        """Generate the announcement from the configured sources.

        Returns:
            Path of the written announcement, or None if there was nothing
            to generate from

        Raises:
            AnnouncementError: If the announcement can't be generated
            ReleaseNotFoundError: If no release matches the project version
        """
        if self.config.jira_merge:
            changes_releases = self._read_changes_xml()
            if not validate_issue_management(self.project.issue_management, self.logger):
                raise AnnouncementError(
                    "Something is wrong with the Issue Management section. See previous error messages.")
            releases = merge_releases(changes_releases, self.get_jira_releases())
            return self.generate(releases)

        if self.config.generate_jira_announcement:
            return self.generate_from_jira()

        if not self.xml_path.exists():
            self.logger.warning(f"changes.xml file {self.xml_path.resolve()} does not exist.")
            return None

        self.logger.info(f"Creating announcement file from {self.xml_path}...")
        return self.generate(self._read_changes_xml())

    def generate_from_jira(self) -> Path:
        """Generate the announcement from JIRA releases only."""
        if not validate_issue_management(self.project.issue_management, self.logger):
            raise AnnouncementError(
                "Something is wrong with the Issue Management section. See previous error messages.")
        releases = self.get_jira_releases()
        self.logger.info("Creating announcement file from JIRA releases...")
        return self.generate(releases)

    def _read_changes_xml(self) -> List[Release]:
        try:
            return parse_changes_xml(self.xml_path, self.logger)
        except HeraldError as e:
            raise AnnouncementError(str(e)) from e

    def get_jira_releases(self) -> List[Release]:
        """Download the project's JIRA issues and group them into releases."""
        downloader = self._downloader or JiraDownloader(
            self.config, self.project.issue_management, self.logger)
        jira_xml = self._path(self.config.jira_xml)

        try:
            downloader.download(jira_xml)
            if not jira_xml.exists():
                self.logger.warning(f"jira file {jira_xml} doesn't exists ")
                return []
            return jira_releases(parse_jira_xml(jira_xml, self.logger))
        except HeraldError as e:
            raise AnnouncementError("Failed to extract JIRA issues from the downloaded file") from e

    def generate(self, releases: List[Release], release: Optional[Release] = None) -> Path:
        """Render the announcement for the release matching the project version.

        Args:
            releases: All known releases
            release: Release to announce; looked up from the version if None

        Returns:
            Path of the written announcement
        """
        if release is None:
            release = get_latest_release(releases, self.version, self.logger)
        context = self.build_context(releases, release)
        return self.process_template(context)

    def build_context(self, releases: Sequence[Release], release: Release) -> Dict[str, str]:
        """Build the placeholder values passed to the template.

        Custom announce parameters are available too, but can't replace
        the built-in values.
        """
        context = {str(k): "" if v is None else str(v)
                   for k, v in self.config.announce_parameters.items()}

        download = ""
        if self.config.url_download:
            download = f"You can download the {self.final_name} here:\n{self.config.url_download}\n"

        values = {
            "groupId": self.project.group_id,
            "artifactId": self.project.artifact_id,
            "version": self.version,
            "packaging": self.project.packaging,
            "url": self.project.url,
            "introduction": self.introduction,
            "developmentTeam": self.development_team,
            "finalName": self.final_name,
            "urlDownload": self.config.url_download,
            "download": download,
            "releases": ", ".join(r.version for r in releases if r.version),
            "releaseVersion": release.version,
            "releaseDate": release.date_release,
            "releaseDescription": release.description,
            "releaseChanges": render_release_changes(release),
            "actions": render_actions(release.actions),
        }
        for kind, actions in group_actions(release.actions).items():
            values[f"{kind}Actions"] = render_actions(actions)

        context.update({k: "" if v is None else v for k, v in values.items()})
        return context

    def find_template(self) -> Path:
        """Locate the template in the project, then among the bundled ones."""
        candidates = [
            self._path(self.config.template_directory) / self.config.template,
            BUNDLED_TEMPLATE_DIRECTORY / self.config.template,
        ]
        for candidate in candidates:
            if candidate.is_file():
                return candidate
        raise TemplateNotFoundError(
            f"Template not found. ( {self.config.template_directory}/{self.config.template} )")

    def template_encoding(self) -> str:
        encoding = self.config.template_encoding or self.project.source_encoding
        if not encoding:
            encoding = locale.getpreferredencoding(False)
            self.logger.warning(
                f"File encoding has not been set, using platform encoding {encoding}, "
                "i.e. build is platform dependent!")
        return encoding

    def process_template(self, context: Dict[str, str]) -> Path:
        """Render the template with context and write it to the output directory."""
        template_path = self.find_template()
        output = self.output_directory / self.config.template
        encoding = self.template_encoding()

        try:
            text = render_template(template_path.read_text(encoding=encoding), context)
            output.parent.mkdir(parents=True, exist_ok=True)
            output.write_text(text, encoding=encoding)
        except (OSError, LookupError, UnicodeError) as e:
            raise AnnouncementError(f"Error writing announcement {output}: {e}") from e

        self.logger.info(f"Created template {output}")
        return output
