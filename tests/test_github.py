"""Tests for the GitHub README fallback."""

import aiohttp
import pytest

from crate_readme.errors import NetworkError, RateLimitError
from crate_readme.github import GitHubClient, parse_repository_url

README_URL = "https://api.github.com/repos/serde-rs/serde/readme"


class TestParseRepositoryUrl:
    @pytest.mark.parametrize("url", [
        "https://github.com/serde-rs/serde",
        "https://github.com/serde-rs/serde/",
        "https://github.com/serde-rs/serde.git",
        "git+https://github.com/serde-rs/serde.git",
        "git://github.com/serde-rs/serde.git",
        "ssh://git@github.com/serde-rs/serde.git",
        "git@github.com:serde-rs/serde.git",
        "https://github.com/serde-rs/serde#readme",
    ])
    def test_github_forms(self, url):
        assert parse_repository_url(url) == ("serde-rs", "serde")

    @pytest.mark.parametrize("url", [None, "", "https://gitlab.com/foo/bar", "not a url"])
    def test_non_github(self, url):
        assert parse_repository_url(url) is None


class TestGetReadme:
    """Tests for fetching raw READMEs through the REST API."""

    @pytest.mark.asyncio
    async def test_raw_readme(self, fake_session_factory, fake_response):
        session = fake_session_factory({README_URL: fake_response(text="# serde")})

        readme = await GitHubClient(session=session).get_readme("serde-rs", "serde")

        assert readme == "# serde"
        headers = session.requests[0][1]["headers"]
        assert headers["Accept"] == "application/vnd.github.v3.raw"
        assert "Authorization" not in headers

    @pytest.mark.asyncio
    async def test_token_is_sent(self, fake_session_factory, fake_response):
        session = fake_session_factory({README_URL: fake_response(text="# serde")})

        await GitHubClient(token="ghp_secret", session=session).get_readme("serde-rs", "serde")

        assert session.requests[0][1]["headers"]["Authorization"] == "token ghp_secret"

    @pytest.mark.asyncio
    async def test_missing_readme(self, fake_session_factory):
        assert await GitHubClient(session=fake_session_factory()).get_readme("serde-rs", "serde") is None

    @pytest.mark.asyncio
    async def test_rate_limited(self, fake_session_factory, fake_response):
        session = fake_session_factory({README_URL: fake_response(status=429, headers={"Retry-After": "60"})})

        with pytest.raises(RateLimitError):
            await GitHubClient(session=session).get_readme("serde-rs", "serde")

    @pytest.mark.asyncio
    async def test_connection_error(self, fake_session_factory):
        session = fake_session_factory({README_URL: aiohttp.ClientConnectionError("refused")})

        with pytest.raises(NetworkError):
            await GitHubClient(session=session).get_readme("serde-rs", "serde")


class TestGetReadmeFromRepository:
    @pytest.mark.asyncio
    async def test_found(self, fake_session_factory, fake_response):
        session = fake_session_factory({README_URL: fake_response(text="# serde")})

        readme = await GitHubClient(session=session).get_readme_from_repository("https://github.com/serde-rs/serde")

        assert readme == "# serde"

    @pytest.mark.asyncio
    async def test_invalid_url(self, fake_session_factory):
        session = fake_session_factory()

        assert await GitHubClient(session=session).get_readme_from_repository("https://example.com/x") is None
        assert session.requests == []

    @pytest.mark.asyncio
    async def test_errors_become_none(self, fake_session_factory, fake_response):
        session = fake_session_factory({README_URL: fake_response(status=500)})

        assert await GitHubClient(session=session).get_readme_from_repository("https://github.com/serde-rs/serde") is None

