"""JIRA issue tracker source."""

from .downloader import JiraDownloader, parse_jira_url, build_jql
from .jira_xml import JiraIssue, parse_jira_xml, issue_to_action, jira_releases

__all__ = [
    "JiraDownloader",
    "parse_jira_url",
    "build_jql",
    "JiraIssue",
    "parse_jira_xml",
    "issue_to_action",
    "jira_releases",
]
