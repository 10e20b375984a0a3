"""JIRA issue download using the XML search view."""

import logging
from pathlib import Path
from typing import List, Optional, Tuple, Union
from urllib.parse import urlparse, parse_qs

import requests

from ..changes.model import IssueManagement
from ..config import Config, split_ids
from ..errors import JiraError


SEARCH_VIEW_PATH = "/sr/jira.issueviews:searchrequest-xml/temp/SearchRequest.xml"
DEFAULT_TIMEOUT = 300


def parse_jira_url(url: str) -> Tuple[str, str]:
    """Split an issue management URL into the JIRA base URL and project.

    Both ``https://host/jira/browse/KEY`` and
    ``https://host/jira/secure/IssueNavigator.jspa?pid=10000`` are understood.

    Args:
        url: Issue management URL

    Returns:
        Tuple of (base_url, project) where project is a key or numeric id

    Raises:
        JiraError: If no project can be found in the URL
    """
    parsed = urlparse(url.strip())
    path = parsed.path.rstrip('/')

    pid = parse_qs(parsed.query).get('pid')
    if pid:
        project = pid[0]
    elif '/browse/' in path:
        project = path.split('/browse/', 1)[1].split('/')[0]
    else:
        project = ''
    if not project:
        raise JiraError(f"The issue management URL {url} doesn't contain a JIRA project key or pid.")

    for marker in ('/browse', '/secure'):
        if marker in path:
            path = path.split(marker, 1)[0]
            break
    base_url = f"{parsed.scheme}://{parsed.netloc}{path}"
    return base_url, project


def _quoted(values: List[str]) -> str:
    return ", ".join('"' + value.replace('"', '\\"') + '"' for value in values)


def build_jql(project: str, status_ids: Optional[str], resolution_ids: Optional[str]) -> str:
    """Build the JQL query selecting the issues to announce.

    Args:
        project: Project key or numeric id
        status_ids: Comma separated statuses, e.g. ``"Closed,Resolved"``
        resolution_ids: Comma separated resolutions, e.g. ``"Fixed"``

    Returns:
        JQL string
    """
    clauses = [f"project = {project}" if project.isdigit() else f'project = "{project}"']
    statuses = split_ids(status_ids)
    if statuses:
        clauses.append(f"status in ({_quoted(statuses)})")
    resolutions = split_ids(resolution_ids)
    if resolutions:
        clauses.append(f"resolution in ({_quoted(resolutions)})")
    return " AND ".join(clauses) + " ORDER BY created DESC"


class JiraDownloader:
    """Downloads the issues of a project to a local XML file."""

    def __init__(self, config: Config, issue_management: IssueManagement,
                 logger: Optional[logging.Logger] = None,
                 session: Optional[requests.Session] = None):
        """Initialize the downloader.

        Args:
            config: Configuration with JIRA filters and credentials
            issue_management: Issue management section of the project
            logger: Logger instance
            session: HTTP session, created on demand if not given
        """
        self.config = config
        self.issue_management = issue_management
        self.logger = logger or logging.getLogger(__name__)
        self.session = session or requests.Session()

        if config.jira_user:
            self.session.auth = (config.jira_user, config.jira_password or "")

    def search_url(self) -> Tuple[str, dict]:
        """URL and query parameters of the XML search request."""
        base_url, project = parse_jira_url(self.issue_management.url or "")
        params = {
            'jqlQuery': build_jql(project, self.config.status_ids, self.config.resolution_ids),
            'tempMax': self.config.max_entries,
        }
        return base_url + SEARCH_VIEW_PATH, params

    def download(self, output: Union[str, Path]) -> Path:
        """Download the issues and write them to output.

        Args:
            output: Path of the XML file to write

        Returns:
            Path of the written file

        Raises:
            JiraError: If the request fails
        """
        url, params = self.search_url()
        output = Path(output)
        self.logger.info(f"Downloading from JIRA at: {url}")
        self.logger.debug(f"JIRA query: {params['jqlQuery']}")

        try:
            response = self.session.get(url, params=params, timeout=DEFAULT_TIMEOUT)
            response.raise_for_status()
        except requests.RequestException as e:
            raise JiraError(f"Error accessing {url}: {e}") from e

        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_bytes(response.content)
        self.logger.debug(f"Downloading to {output}")
        return output
