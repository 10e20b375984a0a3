"""Shared test fixtures for the Herald test suite."""

import os
import textwrap
from pathlib import Path

import pytest

from herald.changes import Action, Release
from herald.config import Config


POM = """\
<?xml version="1.0" encoding="UTF-8"?>
<project xmlns="http://maven.apache.org/POM/4.0.0">
    <groupId>org.example</groupId>
    <artifactId>widget</artifactId>
    <version>1.1-SNAPSHOT</version>
    <name>Widget</name>
    <description>Widgets for everyone.</description>
    <url>https://example.org/widget</url>
    <properties>
        <project.build.sourceEncoding>UTF-8</project.build.sourceEncoding>
    </properties>
    <issueManagement>
        <system>JIRA</system>
        <url>https://issues.example.org/jira/browse/WDG</url>
    </issueManagement>
</project>
"""

CHANGES_XML = """\
<?xml version="1.0" encoding="UTF-8"?>
<document xmlns="http://maven.apache.org/changes/1.0.0">
  <properties>
    <title>Widget changes</title>
  </properties>
  <body>
    <release version="1.1" date="2009-02-01" description="Second release">
      <action type="add" issue="WDG-3" dev="jdoe" due-to="Alice">Support round widgets.</action>
      <action type="fix" issue="WDG-4" dev="jdoe">Widgets no longer wobble.</action>
    </release>
    <release version="1.0" date="2009-01-01" description="First release">
      <action type="add" dev="jdoe">Initial import.</action>
    </release>
  </body>
</document>
"""

JIRA_XML = """\
<?xml version="1.0" encoding="UTF-8"?>
<rss version="0.92">
  <channel>
    <title>Issues</title>
    <item>
      <title>[WDG-7] Widgets melt</title>
      <link>https://issues.example.org/jira/browse/WDG-7</link>
      <key id="10007">WDG-7</key>
      <summary>Widgets melt in the sun</summary>
      <type id="1">Bug</type>
      <status id="6">Closed</status>
      <resolution id="1">Fixed</resolution>
      <assignee username="bob">Bob</assignee>
      <reporter username="carol">Carol</reporter>
      <created>Mon, 2 Feb 2009 10:15:00 +0100</created>
      <fixVersion>1.1</fixVersion>
    </item>
    <item>
      <title>[WDG-8] Paint widgets</title>
      <key id="10008">WDG-8</key>
      <summary>Paint widgets blue</summary>
      <type id="2">New Feature</type>
      <status id="6">Closed</status>
      <resolution id="1">Fixed</resolution>
      <assignee username="bob">Bob</assignee>
      <fixVersion>1.2</fixVersion>
    </item>
    <item>
      <key id="10009">WDG-9</key>
      <summary>Unscheduled</summary>
      <type id="4">Improvement</type>
    </item>
  </channel>
</rss>
"""


@pytest.fixture
def write_file(tmp_path):
    """Factory fixture that writes a dedented file below tmp_path and returns its path."""
    def _write(relative: str, content: str) -> Path:
        path = tmp_path / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(textwrap.dedent(content), encoding="utf-8")
        return path
    return _write


@pytest.fixture
def project_dir(write_file, tmp_path):
    """A project directory with a pom.xml and a changes.xml."""
    write_file("pom.xml", POM)
    write_file("src/changes/changes.xml", CHANGES_XML)
    return tmp_path


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Hide HERALD_ variables of the environment running the tests."""
    for name in list(os.environ):
        if name.upper().startswith("HERALD_"):
            monkeypatch.delenv(name)


@pytest.fixture
def config():
    """Default configuration, independent of config files and environment."""
    return Config()


@pytest.fixture
def make_release():
    """Factory for releases with simple numbered actions."""
    def _make(version, *issues, **kwargs):
        actions = tuple(Action(type="fix", issue=issue, action=f"Fixed {issue}") for issue in issues)
        return Release(version=version, actions=actions, **kwargs)
    return _make
