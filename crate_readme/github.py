#!/usr/bin/env python3
"""
GitHub fallback for crates whose README is not on crates.io.
"""

import asyncio
import logging
import re
from typing import Dict, Optional, Tuple

import aiohttp

from .errors import NetworkError, PackageReadmeError, handle_http_error

USER_AGENT = 'cargo-readme-mcp/1.0 (crate README lookup)'

GITHUB_REPO_PATTERN = re.compile(r'github\.com/([^/]+)/([^/#?]+)')


def parse_repository_url(url: str) -> Optional[Tuple[str, str]]:
    """
    Extract (owner, repo) from a GitHub repository URL.

    Accepts https, git://, git+https, ssh://git@ and git@github.com: forms,
    with or without a trailing .git.
    """
    if not url or not isinstance(url, str):
        return None

    url = url.strip()
    url = re.sub(r'^git\+', '', url)
    url = re.sub(r'^git@github\.com:', 'https://github.com/', url)
    url = re.sub(r'^git://', 'https://', url)
    url = re.sub(r'^ssh://git@', 'https://', url)
    url = url.rstrip('/')
    url = re.sub(r'\.git$', '', url)

    match = GITHUB_REPO_PATTERN.search(url)
    if not match:
        return None
    return match.group(1), match.group(2)


class GitHubClient:
    """Fetches raw README files through the GitHub REST API."""

    BASE_URL = 'https://api.github.com'

    def __init__(self, token: Optional[str] = None, logger: Optional[logging.Logger] = None, timeout: float = 30, session: Optional[aiohttp.ClientSession] = None):
        self.token = token
        self.logger = logger or logging.getLogger(__name__)
        self.timeout = timeout
        self.session = session
        self._owns_session = session is None

    async def __aenter__(self):
        if self.session is None:
            self.session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.timeout),
                headers={'User-Agent': USER_AGENT}
            )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        if self._owns_session and self.session:
            await self.session.close()
            self.session = None

    def _headers(self, accept: str) -> Dict[str, str]:
        headers = {'Accept': accept}
        if self.token:
            headers['Authorization'] = f"token {self.token}"
        return headers

    async def get_readme(self, owner: str, repo: str) -> Optional[str]:
        """
        Fetch the default-branch README of a repository.

        Returns:
            README text, or None if the repository has no README

        Raises:
            PackageReadmeError: for rate limiting, server and network errors
        """
        url = f"{self.BASE_URL}/repos/{owner}/{repo}/readme"
        context = f"GitHub API for {owner}/{repo}"
        self.logger.debug("Fetching README from GitHub", extra={'extra_data': {'owner': owner, 'repo': repo}})

        try:
            async with self.session.get(url, headers=self._headers('application/vnd.github.v3.raw')) as response:
                if response.status == 404:
                    self.logger.debug("README not found on GitHub", extra={'extra_data': {'owner': owner, 'repo': repo}})
                    return None
                if response.status != 200:
                    handle_http_error(response.status, response, context, f"{owner}/{repo}")
                return await response.text()
        except PackageReadmeError:
            raise
        except asyncio.TimeoutError as e:
            raise NetworkError(f"Request timeout for {context}", e) from e
        except aiohttp.ClientError as e:
            raise NetworkError(f"Failed to connect to {context}", e) from e

    async def get_readme_from_repository(self, repository_url: str) -> Optional[str]:
        """Best-effort README lookup for a repository URL; None on any failure."""
        repo_info = parse_repository_url(repository_url)
        if not repo_info:
            self.logger.warning("Invalid repository URL format", extra={'extra_data': {'repository': repository_url}})
            return None

        owner, repo = repo_info
        try:
            return await self.get_readme(owner, repo)
        except PackageReadmeError:
            self.logger.warning(
                "Failed to fetch README from GitHub", exc_info=True,
                extra={'extra_data': {'repository': repository_url}}
            )
            return None
