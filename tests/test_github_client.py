import json
import unittest
from unittest.mock import AsyncMock, MagicMock

import aiohttp

from devmetrics.domain.exceptions import FetchFailureException, UserNotFoundException
from devmetrics.infrastructure.github_client import GitHubRestClient


def _response(status: int, payload=None) -> AsyncMock:
    resp = AsyncMock()
    resp.status = status
    resp.json = AsyncMock(return_value=payload)
    resp.__aenter__ = AsyncMock(return_value=resp)
    resp.__aexit__ = AsyncMock(return_value=False)
    return resp


class TestGitHubRestClient(unittest.TestCase):
    def test_headers_are_unauthenticated(self) -> None:
        client = GitHubRestClient()

        self.assertIsInstance(client.headers, dict)
        self.assertNotIn("Authorization", client.headers)
        self.assertIn("User-Agent", client.headers)
        self.assertIn("Accept", client.headers)

    def test_urls_quote_the_handle(self) -> None:
        client = GitHubRestClient(api_base="https://api.example/")

        self.assertEqual(client.user_url("octocat"), "https://api.example/users/octocat")
        self.assertEqual(client.repos_url("a/b"), "https://api.example/users/a%2Fb/repos")


class TestFetchUser(unittest.IsolatedAsyncioTestCase):
    async def test_returns_payload_on_success(self) -> None:
        client = GitHubRestClient()
        session = MagicMock()
        session.get = MagicMock(return_value=_response(200, {"login": "octocat"}))

        data = await client.fetch_user(session, "octocat")

        self.assertEqual(data, {"login": "octocat"})
        self.assertEqual(session.get.call_args.args[0], "https://api.github.com/users/octocat")

    async def test_404_is_not_found(self) -> None:
        client = GitHubRestClient()
        session = MagicMock()
        session.get = MagicMock(return_value=_response(404))

        with self.assertRaises(UserNotFoundException) as ctx:
            await client.fetch_user(session, "nobody")

        self.assertEqual(str(ctx.exception), "User not found")

    async def test_server_error_is_fetch_failure(self) -> None:
        client = GitHubRestClient()
        session = MagicMock()
        session.get = MagicMock(return_value=_response(503))

        with self.assertRaises(FetchFailureException) as ctx:
            await client.fetch_user(session, "octocat")

        self.assertEqual(ctx.exception.status, 503)

    async def test_transport_error_is_fetch_failure(self) -> None:
        client = GitHubRestClient()
        session = MagicMock()
        session.get = MagicMock(side_effect=aiohttp.ClientConnectionError("connection reset"))

        with self.assertRaises(FetchFailureException):
            await client.fetch_user(session, "octocat")

        # Single attempt, no retry.
        self.assertEqual(session.get.call_count, 1)


class TestFetchRepositories(unittest.IsolatedAsyncioTestCase):
    async def test_requests_one_page_sorted_by_last_push(self) -> None:
        client = GitHubRestClient()
        session = MagicMock()
        session.get = MagicMock(return_value=_response(200, [{"name": "a"}, {"name": "b"}]))

        repos = await client.fetch_repositories(session, "octocat")

        self.assertEqual([r["name"] for r in repos], ["a", "b"])
        kwargs = session.get.call_args.kwargs
        self.assertEqual(kwargs["params"], {"per_page": "100", "sort": "pushed"})

    async def test_404_is_fetch_failure(self) -> None:
        client = GitHubRestClient()
        session = MagicMock()
        session.get = MagicMock(return_value=_response(404))

        with self.assertRaises(FetchFailureException) as ctx:
            await client.fetch_repositories(session, "nobody")

        self.assertEqual(str(ctx.exception), "Could not fetch repositories")

    async def test_non_list_payload_is_fetch_failure(self) -> None:
        client = GitHubRestClient()
        session = MagicMock()
        session.get = MagicMock(return_value=_response(200, {"message": "odd"}))

        with self.assertRaises(FetchFailureException):
            await client.fetch_repositories(session, "octocat")

    async def test_invalid_json_body_is_fetch_failure(self) -> None:
        client = GitHubRestClient()
        resp = _response(200)
        resp.json = AsyncMock(side_effect=json.JSONDecodeError("Expecting value", "<html>", 0))
        session = MagicMock()
        session.get = MagicMock(return_value=resp)

        with self.assertRaises(FetchFailureException) as ctx:
            await client.fetch_repositories(session, "octocat")

        self.assertEqual(str(ctx.exception), "Could not fetch repositories")


class TestFetchUserPayload(unittest.IsolatedAsyncioTestCase):
    async def test_invalid_json_body_is_fetch_failure(self) -> None:
        client = GitHubRestClient()
        resp = _response(200)
        resp.json = AsyncMock(side_effect=json.JSONDecodeError("Expecting value", "<html>", 0))
        session = MagicMock()
        session.get = MagicMock(return_value=resp)

        with self.assertRaises(FetchFailureException) as ctx:
            await client.fetch_user(session, "octocat")

        self.assertEqual(str(ctx.exception), "Could not fetch user profile")

    async def test_non_object_payload_is_fetch_failure(self) -> None:
        client = GitHubRestClient()
        session = MagicMock()
        session.get = MagicMock(return_value=_response(200, ["not", "a", "dict"]))

        with self.assertRaises(FetchFailureException):
            await client.fetch_user(session, "octocat")
