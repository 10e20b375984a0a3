"""Configuration management for Herald."""

import json
import os
from pathlib import Path
from typing import Any, Optional, Dict, List

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_TEMPLATE = "announcement.txt"
DEFAULT_TEMPLATE_DIRECTORY = "src/main/announcement"

ENV_PREFIX = "HERALD_"


def split_ids(value: Optional[str]) -> List[str]:
    """Split a comma separated id list, dropping blanks.

    Args:
        value: Comma separated string such as ``"Closed, Resolved"``

    Returns:
        List of stripped ids
    """
    if not value:
        return []
    return [part.strip() for part in value.split(',') if part.strip()]


class Config(BaseSettings):
    """Configuration settings for Herald."""

    model_config = SettingsConfigDict(env_prefix=ENV_PREFIX, case_sensitive=False)

    # changes.xml / announcement
    xml_path: str = "src/changes/changes.xml"
    output_directory: str = "target/announcement"
    template: str = DEFAULT_TEMPLATE
    template_directory: str = DEFAULT_TEMPLATE_DIRECTORY
    template_encoding: Optional[str] = None
    version: Optional[str] = None
    final_name: Optional[str] = None
    url_download: Optional[str] = None
    development_team: Optional[str] = None
    introduction: Optional[str] = None
    announce_parameters: Dict[str, Any] = {}

    # JIRA
    generate_jira_announcement: bool = False
    jira_merge: bool = False
    status_ids: str = "Closed"
    resolution_ids: str = "Fixed"
    max_entries: int = 25
    jira_user: Optional[str] = None
    jira_password: Optional[str] = None
    jira_xml: str = "target/jira-announcement.xml"

    @field_validator('max_entries')
    @classmethod
    def positive_max_entries(cls, v):
        """JIRA needs at least one entry to return anything."""
        if v < 1:
            raise ValueError("max_entries must be at least 1")
        return v


def load_json_config(config_path: str) -> dict:
    """Load configuration from JSON file.

    Args:
        config_path: Path to JSON configuration file

    Returns:
        Configuration dictionary
    """
    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            return json.load(f)
    except (FileNotFoundError, json.JSONDecodeError) as e:
        raise ValueError(f"Error loading config file {config_path}: {e}")


def find_config_file() -> Optional[str]:
    """Find configuration file in common locations.

    Returns:
        Path to config file or None if not found
    """
    search_paths = [
        "herald.json",
        ".herald.json",
        "~/.herald.json",
        "~/.config/herald/config.json",
        "/etc/herald/config.json"
    ]

    for path_str in search_paths:
        path = Path(path_str).expanduser()
        if path.exists() and path.is_file():
            return str(path)

    return None


def get_config(config_file: Optional[str] = None, **overrides) -> Config:
    """Load configuration from a JSON file, environment variables and overrides.

    Precedence, lowest first: JSON file, environment variables, ``overrides``.
    Overrides set to None are ignored.

    Args:
        config_file: Optional path to JSON config file
        **overrides: Values given on the command line

    Returns:
        Configuration object
    """
    config_data = {}

    json_config_path = config_file or find_config_file()
    if json_config_path:
        # An explicitly requested file must load; a discovered one may be skipped
        try:
            config_data.update(load_json_config(json_config_path))
        except ValueError:
            if config_file:
                raise

    # Settings read from the environment must not be shadowed by the file
    environment = {name.upper() for name in os.environ}
    for field in Config.model_fields:
        if f"{ENV_PREFIX}{field}".upper() in environment:
            config_data.pop(field, None)

    config_data.update({k: v for k, v in overrides.items() if v is not None})

    return Config(**config_data)


def create_sample_config(path: str = "herald.json") -> None:
    """Create a sample configuration file.

    Args:
        path: Path where to create the sample config file
    """
    sample_config = {
        "xml_path": "src/changes/changes.xml",
        "output_directory": "target/announcement",
        "template": DEFAULT_TEMPLATE,
        "template_encoding": "UTF-8",
        "url_download": "https://example.org/downloads",
        "jira_merge": False,
        "status_ids": "Closed",
        "resolution_ids": "Fixed",
        "max_entries": 25,
        "jira_user": "your-jira-user-here",
        "announce_parameters": {"releaseManager": "Jane Doe"}
    }

    with open(path, 'w', encoding='utf-8') as f:
        json.dump(sample_config, f, indent=2)

    print(f"Sample configuration file created at: {path}")
    print("Please edit the file and set your JIRA credentials if the tracker is private.")
