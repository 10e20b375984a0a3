"""Reader for ``changes.xml`` files.

Handles documents with or without the changes 1.0.0 namespace::

    <document>
      <body>
        <release version="1.0" date="2009-01-01" description="First">
          <action type="add" issue="ABC-1" dev="jdoe" due-to="Jane">Did it</action>
        </release>
      </body>
    </document>
"""

import logging
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import List, Optional, Union

from ..errors import ChangesXMLError
from .model import Action, Release


def _local(tag: str) -> str:
    """Strip the ``{namespace}`` prefix from an element tag."""
    return tag.split("}")[-1] if "}" in tag else tag


def _children(el, name: str):
    return [child for child in el if _local(child.tag) == name]


def _text(el) -> Optional[str]:
    # Actions may contain inline markup; keep all of the text
    text = "".join(el.itertext()).strip()
    return " ".join(text.split()) or None


def _parse_action(action_el) -> Action:
    return Action(
        type=action_el.get("type"),
        issue=action_el.get("issue"),
        action=_text(action_el),
        due_to=action_el.get("due-to"),
        due_to_email=action_el.get("due-to-email"),
        dev=action_el.get("dev"),
    )


def _parse_release(release_el) -> Release:
    return Release(
        version=release_el.get("version"),
        date_release=release_el.get("date"),
        description=release_el.get("description"),
        actions=tuple(_parse_action(a) for a in _children(release_el, "action")),
    )


def parse_changes_xml(path: Union[str, Path],
                      logger: Optional[logging.Logger] = None) -> List[Release]:
    """Parse a changes.xml file into releases, in document order.

    Args:
        path: Path to the changes.xml file

    Returns:
        List of releases

    Raises:
        ChangesXMLError: If the file can't be read or parsed
    """
    logger = logger or logging.getLogger(__name__)
    try:
        root = ET.parse(str(path)).getroot()
    except (OSError, ET.ParseError) as e:
        raise ChangesXMLError(f"An error occurred when parsing the changes.xml file {path}: {e}") from e

    releases = []
    for body in _children(root, "body"):
        for release_el in _children(body, "release"):
            releases.append(_parse_release(release_el))

    logger.debug(f"Read {len(releases)} releases from {path}")
    return releases
