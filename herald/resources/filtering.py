"""Token filtering and ``.properties`` loading for resource copies."""

import re
from pathlib import Path
from typing import Dict, Iterable, Optional, Union

from ..errors import ResourcesError


# Files with these extensions are copied without filtering
DEFAULT_NON_FILTERED_EXTENSIONS = ("jpg", "jpeg", "gif", "bmp", "png")

_ESCAPES = {"t": "\t", "n": "\n", "r": "\r", "f": "\f"}


def _unescape(value: str) -> str:
    result = []
    i = 0
    while i < len(value):
        char = value[i]
        if char != "\\" or i + 1 >= len(value):
            result.append(char)
            i += 1
            continue
        nxt = value[i + 1]
        if nxt == "u" and re.match(r"[0-9a-fA-F]{4}", value[i + 2:i + 6]):
            result.append(chr(int(value[i + 2:i + 6], 16)))
            i += 6
        else:
            result.append(_ESCAPES.get(nxt, nxt))
            i += 2
    return "".join(result)


def _logical_lines(text: str):
    """Join lines ending in an odd number of backslashes with their successor."""
    pending = ""
    for raw in text.splitlines():
        line = raw.lstrip() if pending else raw
        trailing = len(line) - len(line.rstrip("\\"))
        if trailing % 2 == 1:
            pending += line[:-1]
            continue
        yield pending + line
        pending = ""
    if pending:
        yield pending


def parse_properties(text: str) -> Dict[str, str]:
    """Parse the contents of a Java ``.properties`` file.

    Supports ``#``/``!`` comments, ``=``, ``:`` and whitespace separators,
    line continuations and backslash escapes.
    """
    properties = {}
    for line in _logical_lines(text):
        stripped = line.lstrip()
        if not stripped or stripped[0] in "#!":
            continue
        match = re.match(r"((?:\\.|[^\\=:\s])*)\s*[=:]?\s*(.*)$", stripped)
        key, value = match.group(1), match.group(2)
        properties[_unescape(key)] = _unescape(value)
    return properties


def load_properties(path: Union[str, Path], encoding: str = "iso-8859-1") -> Dict[str, str]:
    """Load a ``.properties`` file.

    Raises:
        ResourcesError: If the file can't be read
    """
    try:
        return parse_properties(Path(path).read_text(encoding=encoding))
    except (OSError, UnicodeError) as e:
        raise ResourcesError(f"Error loading property file '{path}': {e}") from e


def filter_text(text: str, values: Dict[str, str], escape_string: Optional[str] = None) -> str:
    """Replace ``${key}`` and ``@key@`` tokens with their values.

    Tokens without a value are left unchanged. A token preceded by
    ``escape_string`` is kept literally and the escape is removed.
    """
    escape = f"(?P<escape>{re.escape(escape_string)})?" if escape_string else ""
    pattern = re.compile(escape + r"(?P<token>\$\{(?P<dollar>[^}\n]+)\}|@(?P<at>[\w.\-]+)@)")

    def _replace(match):
        token = match.group("token")
        if escape_string and match.group("escape"):
            return token
        key = match.group("dollar") or match.group("at")
        return values.get(key, token)

    return pattern.sub(_replace, text)


def is_filtered_extension(path: Path, non_filtered_extensions: Iterable[str]) -> bool:
    """False for files whose extension is in the non-filtered list."""
    extension = path.suffix.lower().lstrip(".")
    return extension not in {e.lower().lstrip(".") for e in non_filtered_extensions}


def ant_pattern_to_regex(pattern: str) -> "re.Pattern":
    """Compile an ant-style path pattern (``**/*.xml``, ``conf/?.txt``)."""
    pattern = pattern.replace("\\", "/").lstrip("/")
    if pattern.endswith("/"):
        pattern += "**"

    regex = []
    i = 0
    while i < len(pattern):
        if pattern.startswith("**/", i):
            regex.append("(?:.*/)?")
            i += 3
        elif pattern.startswith("**", i):
            regex.append(".*")
            i += 2
        elif pattern[i] == "*":
            regex.append("[^/]*")
            i += 1
        elif pattern[i] == "?":
            regex.append("[^/]")
            i += 1
        else:
            regex.append(re.escape(pattern[i]))
            i += 1
    return re.compile("".join(regex) + r"\Z")


def path_matches(relative_path: str, patterns: Iterable[str]) -> bool:
    """True if relative_path matches any of the ant patterns."""
    return any(ant_pattern_to_regex(p).match(relative_path) for p in patterns)
