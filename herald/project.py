"""Project model read from a ``pom.xml`` file.

Only the parts of the POM that the announcement and resources commands
need are parsed: coordinates, descriptive fields, properties, issue
management and the ``<build>`` resources and filters.
"""

import re
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Union

from .changes.model import IssueManagement
from .errors import ProjectError

# XML namespace used by Maven POM files (POM model version 4.0.0).
NS = {"m": "http://maven.apache.org/POM/4.0.0"}

EXPRESSION_RE = re.compile(r"\$\{([^}]+)\}")

DEFAULT_RESOURCE_DIRECTORY = "src/main/resources"


@dataclass
class Resource:
    """A ``<resource>`` entry of the build section.

    Attributes:
        directory: Source directory, relative to the project basedir.
        target_path: Optional sub directory of the output directory.
        filtering: Whether tokens in the files get replaced.
        includes: Ant-style include patterns; empty means everything.
        excludes: Ant-style exclude patterns.
    """
    directory: str
    target_path: Optional[str] = None
    filtering: bool = False
    includes: List[str] = field(default_factory=list)
    excludes: List[str] = field(default_factory=list)


@dataclass
class MavenProject:
    """Parse result for a single ``pom.xml``."""
    group_id: str
    artifact_id: str
    version: Optional[str] = None
    packaging: str = "jar"
    name: Optional[str] = None
    description: Optional[str] = None
    url: Optional[str] = None
    final_name: Optional[str] = None
    source_encoding: Optional[str] = None
    properties: Dict[str, str] = field(default_factory=dict)
    issue_management: Optional[IssueManagement] = None
    resources: List[Resource] = field(default_factory=list)
    filters: List[str] = field(default_factory=list)
    basedir: Path = field(default_factory=Path.cwd)

    def expression_values(self) -> Dict[str, str]:
        """Values available to ``${...}`` expressions, project fields last."""
        values = dict(self.properties)
        values.update({
            "basedir": str(self.basedir),
            "project.basedir": str(self.basedir),
            "project.groupId": self.group_id,
            "project.artifactId": self.artifact_id,
            "project.version": self.version or "",
            "project.packaging": self.packaging,
            "project.name": self.name or self.artifact_id,
            "project.description": self.description or "",
            "project.url": self.url or "",
            "project.build.finalName": self.final_name or "",
        })
        if self.source_encoding:
            values["project.build.sourceEncoding"] = self.source_encoding
        return values

    def resolve(self, value: Optional[str]) -> Optional[str]:
        """Resolve ``${...}`` expressions in value against this project."""
        return resolve_expressions(value, self.expression_values())


def resolve_expressions(value: Optional[str], values: Dict[str, str], _depth: int = 0) -> Optional[str]:
    """Replace every ``${name}`` in value with its entry in values.

    Unknown names are left untouched. Resolved values that contain
    expressions themselves are resolved again, up to a depth of 10 to
    guard against circular references.
    """
    if not value or _depth > 10:
        return value

    def _replace(match):
        name = match.group(1)
        if name in values:
            return values[name]
        # ${pom.version} and ${version} are older spellings of ${project.version}
        for prefix in ("pom.", ""):
            if name.startswith(prefix) and f"project.{name[len(prefix):]}" in values:
                return values[f"project.{name[len(prefix):]}"]
        return match.group(0)

    resolved = EXPRESSION_RE.sub(_replace, value)
    if resolved != value and "${" in resolved:
        return resolve_expressions(resolved, values, _depth + 1)
    return resolved


def _find(el, tag, ns=NS):
    """Find a direct child element, with or without the Maven namespace."""
    result = el.find(f"m:{tag}", ns)
    if result is not None:
        return result
    return el.find(tag)


def _findall(el, tag, ns=NS):
    return list(el.findall(f"m:{tag}", ns)) + list(el.findall(tag))


def _text(el, tag, ns=NS):
    """Stripped text of a child element, or None if missing or empty."""
    child = _find(el, tag, ns)
    if child is not None and child.text and child.text.strip():
        return child.text.strip()
    return None


def _texts(el, tag, item_tag):
    parent = _find(el, tag)
    if parent is None:
        return []
    return [item.text.strip() for item in _findall(parent, item_tag) if item.text and item.text.strip()]


def _parse_resource(resource_el) -> Resource:
    filtering = _text(resource_el, "filtering")
    return Resource(
        directory=_text(resource_el, "directory") or DEFAULT_RESOURCE_DIRECTORY,
        target_path=_text(resource_el, "targetPath"),
        filtering=bool(filtering and filtering.lower() == "true"),
        includes=_texts(resource_el, "includes", "include"),
        excludes=_texts(resource_el, "excludes", "exclude"),
    )


def parse_project(pom_path: Union[str, Path]) -> MavenProject:
    """Parse a ``pom.xml`` file into a MavenProject.

    groupId and version fall back to the ``<parent>`` values. The final name
    defaults to ``artifactId-version``.

    Args:
        pom_path: Filesystem path to the pom.xml file.

    Returns:
        A populated MavenProject whose basedir is the pom's directory.

    Raises:
        ProjectError: If the file is missing or is not valid XML.
    """
    pom_path = Path(pom_path)
    try:
        root = ET.parse(pom_path).getroot()
    except (OSError, ET.ParseError) as e:
        raise ProjectError(f"Unable to read project file {pom_path}: {e}") from e

    parent_el = _find(root, "parent")
    parent_gid = parent_ver = None
    if parent_el is not None:
        parent_gid = _text(parent_el, "groupId")
        parent_ver = _text(parent_el, "version")

    properties = {}
    props_el = _find(root, "properties")
    if props_el is not None:
        for child in props_el:
            tag = child.tag.split("}")[-1] if "}" in child.tag else child.tag
            properties[tag] = child.text.strip() if child.text else ""

    issue_management = None
    im_el = _find(root, "issueManagement")
    if im_el is not None:
        issue_management = IssueManagement(system=_text(im_el, "system"), url=_text(im_el, "url"))

    resources = []
    filters = []
    final_name = None
    build_el = _find(root, "build")
    if build_el is not None:
        final_name = _text(build_el, "finalName")
        filters = _texts(build_el, "filters", "filter")
        resources_el = _find(build_el, "resources")
        if resources_el is not None:
            resources = [_parse_resource(r) for r in _findall(resources_el, "resource")]
    if not resources:
        resources = [Resource(directory=DEFAULT_RESOURCE_DIRECTORY)]

    project = MavenProject(
        group_id=_text(root, "groupId") or parent_gid or "",
        artifact_id=_text(root, "artifactId") or "",
        version=_text(root, "version") or parent_ver,
        packaging=_text(root, "packaging") or "jar",
        name=_text(root, "name"),
        description=_text(root, "description"),
        url=_text(root, "url"),
        source_encoding=properties.get("project.build.sourceEncoding"),
        properties=properties,
        issue_management=issue_management,
        resources=resources,
        filters=filters,
        basedir=pom_path.resolve().parent,
    )

    project.version = project.resolve(project.version)
    project.final_name = project.resolve(final_name) or f"{project.artifact_id}-{project.version}"
    project.url = project.resolve(project.url)
    if project.issue_management is not None:
        project.issue_management = IssueManagement(
            system=project.issue_management.system,
            url=project.resolve(project.issue_management.url),
        )
    return project
