"""Tests for the JIRA source: URL handling, download and XML parsing."""

import pytest
import requests

from herald.changes import IssueManagement
from herald.config import Config
from herald.errors import JiraError
from herald.jira import (
    JiraDownloader,
    JiraIssue,
    build_jql,
    issue_to_action,
    jira_releases,
    parse_jira_url,
    parse_jira_xml,
)

from .conftest import JIRA_XML


class FakeResponse:
    def __init__(self, content=b"", status_code=200):
        self.content = content
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error")


class FakeSession:
    def __init__(self, response=None, error=None):
        self.auth = None
        self.calls = []
        self.response = response or FakeResponse()
        self.error = error

    def get(self, url, params=None, timeout=None):
        self.calls.append((url, params, timeout))
        if self.error:
            raise self.error
        return self.response


class TestParseJiraUrl:
    def test_browse_url(self):
        assert parse_jira_url("https://issues.apache.org/jira/browse/MCHANGES") == \
            ("https://issues.apache.org/jira", "MCHANGES")

    def test_browse_url_with_trailing_slash(self):
        assert parse_jira_url("https://jira.example.org/browse/ABC/") == ("https://jira.example.org", "ABC")

    def test_pid_url(self):
        url = "https://jira.example.org/secure/IssueNavigator.jspa?reset=true&pid=10450"
        assert parse_jira_url(url) == ("https://jira.example.org", "10450")

    def test_no_project(self):
        with pytest.raises(JiraError):
            parse_jira_url("https://jira.example.org/")


class TestBuildJql:
    def test_key_with_filters(self):
        jql = build_jql("WDG", "Closed, Resolved", "Fixed")
        assert jql == ('project = "WDG" AND status in ("Closed", "Resolved") '
                       'AND resolution in ("Fixed") ORDER BY created DESC')

    def test_numeric_project_and_no_filters(self):
        assert build_jql("10450", "", None) == "project = 10450 ORDER BY created DESC"


class TestJiraDownloader:
    def _downloader(self, session, **config):
        issue_management = IssueManagement(system="jira", url="https://issues.example.org/jira/browse/WDG")
        return JiraDownloader(Config(**config), issue_management, session=session)

    def test_download_writes_file(self, tmp_path):
        session = FakeSession(FakeResponse(JIRA_XML.encode("utf-8")))
        output = tmp_path / "target" / "jira.xml"

        result = self._downloader(session, max_entries=10).download(output)

        assert result == output
        assert output.read_text(encoding="utf-8") == JIRA_XML
        url, params, _ = session.calls[0]
        assert url == ("https://issues.example.org/jira"
                       "/sr/jira.issueviews:searchrequest-xml/temp/SearchRequest.xml")
        assert params["tempMax"] == 10
        assert 'project = "WDG"' in params["jqlQuery"]
        assert 'status in ("Closed")' in params["jqlQuery"]
        assert 'resolution in ("Fixed")' in params["jqlQuery"]

    def test_credentials(self):
        session = FakeSession()
        self._downloader(session, jira_user="bob", jira_password="secret")
        assert session.auth == ("bob", "secret")

    def test_no_credentials(self):
        session = FakeSession()
        self._downloader(session)
        assert session.auth is None

    def test_http_error(self, tmp_path):
        session = FakeSession(FakeResponse(status_code=401))
        with pytest.raises(JiraError):
            self._downloader(session).download(tmp_path / "jira.xml")
        assert not (tmp_path / "jira.xml").exists()

    def test_connection_error(self, tmp_path):
        session = FakeSession(error=requests.ConnectionError("refused"))
        with pytest.raises(JiraError, match="refused"):
            self._downloader(session).download(tmp_path / "jira.xml")


class TestParseJiraXml:
    def test_issues(self, write_file):
        issues = parse_jira_xml(write_file("jira.xml", JIRA_XML))

        assert [i.key for i in issues] == ["WDG-7", "WDG-8", "WDG-9"]
        bug = issues[0]
        assert bug.summary == "Widgets melt in the sun"
        assert bug.type == "Bug"
        assert bug.status == "Closed"
        assert bug.resolution == "Fixed"
        assert bug.assignee == "Bob"
        assert bug.reporter == "Carol"
        assert bug.fix_versions == ["1.1"]
        assert (bug.created.year, bug.created.month, bug.created.day) == (2009, 2, 2)
        assert issues[2].fix_versions == []
        assert issues[2].created is None

    def test_malformed(self, write_file):
        with pytest.raises(JiraError):
            parse_jira_xml(write_file("jira.xml", "<rss><channel>"))


class TestJiraReleases:
    def test_grouped_by_fix_version(self, write_file):
        releases = jira_releases(parse_jira_xml(write_file("jira.xml", JIRA_XML)))

        assert [r.version for r in releases] == ["1.1", "1.2"]
        assert [a.issue for a in releases[0].actions] == ["WDG-7"]
        assert releases[0].actions[0].type == "fix"
        assert releases[1].actions[0].type == "add"

    def test_issue_in_several_versions(self):
        issue = JiraIssue(key="X-1", type="Improvement", fix_versions=["1.0", "2.0"])
        releases = jira_releases([issue])
        assert [r.version for r in releases] == ["1.0", "2.0"]
        assert releases[0].actions == releases[1].actions

    def test_issue_to_action(self):
        action = issue_to_action(JiraIssue(key="X-1", summary="Did it", type="Task", assignee="bob"))
        assert action.issue == "X-1"
        assert action.action == "Did it"
        assert action.type == ""
        assert action.dev == "bob"
