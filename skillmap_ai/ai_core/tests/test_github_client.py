import base64
import unittest

from skillmap_ai.ai_core.client.github_client import GitHubClient, parse_repository_url
from skillmap_ai.ai_core.common.exceptions import InvalidRepositoryUrl, RepositoryLookupError


class StubGitHubClient(GitHubClient):
    """_get_json을 경로별 고정 응답으로 대체한 클라이언트."""

    def __init__(self, responses):
        super().__init__(token="t")
        self._responses = responses
        self.paths = []

    def _get_json(self, path):
        self.paths.append(path)
        response = self._responses.get(path, (404, None))
        if isinstance(response, Exception):
            raise response
        return response


def _content(text: str):
    return 200, {"content": base64.b64encode(text.encode("utf-8")).decode("ascii")}


class ParseRepositoryUrlTests(unittest.TestCase):
    def test_accepts_common_forms(self) -> None:
        cases = {
            "https://github.com/octo/app": ("octo", "app"),
            "github.com/octo/app.git": ("octo", "app"),
            "https://www.github.com/octo/app/tree/main/src": ("octo", "app"),
            "  https://github.com/octo/app/  ": ("octo", "app"),
        }
        for url, expected in cases.items():
            with self.subTest(url=url):
                self.assertEqual(parse_repository_url(url), expected)

    def test_rejects_other_urls(self) -> None:
        for url in ("", "https://gitlab.com/octo/app", "https://github.com/octo", "not a url"):
            with self.subTest(url=url):
                with self.assertRaises(InvalidRepositoryUrl):
                    parse_repository_url(url)


class GitHubClientTests(unittest.TestCase):
    def test_repository_exists(self) -> None:
        client = StubGitHubClient({"/repos/octo/app": (200, {"id": 1})})
        self.assertTrue(client.repository_exists("octo", "app"))
        self.assertFalse(client.repository_exists("octo", "missing"))

    def test_repository_lookup_error_on_unexpected_status(self) -> None:
        client = StubGitHubClient({"/repos/octo/app": (500, None)})
        with self.assertRaises(RepositoryLookupError):
            client.repository_exists("octo", "app")

    def test_detect_manifest_follows_candidate_order(self) -> None:
        """
        package.json이 없으면 go.mod를 다음 후보로 사용하는지 검증합니다.

        @returns {None} 테스트만 수행합니다.
        """
        client = StubGitHubClient(
            {
                "/repos/octo/app/contents/go.mod": _content("module example.com/app\n"),
                "/repos/octo/app/contents/requirements.txt": _content("django\n"),
            }
        )
        manifest = client.detect_manifest("octo", "app")
        self.assertEqual(manifest.path, "go.mod")
        self.assertEqual(manifest.ecosystem, "Go")
        self.assertEqual(manifest.content, "module example.com/app\n")
        self.assertNotIn("/repos/octo/app/contents/requirements.txt", client.paths)

    def test_detect_manifest_none_and_lookup_errors(self) -> None:
        client = StubGitHubClient({"/repos/octo/app/contents/package.json": RepositoryLookupError("timeout")})
        self.assertIsNone(client.detect_manifest("octo", "app"))

    def test_list_user_languages_dedupes_in_order(self) -> None:
        repos = [{"language": "Python"}, {"language": None}, {"language": "Go"}, {"language": "Python"}]
        client = StubGitHubClient({"/users/octo/repos?sort=updated&per_page=10": (200, repos)})
        self.assertEqual(client.list_user_languages("octo"), ["Python", "Go"])

    def test_list_user_languages_unknown_user(self) -> None:
        with self.assertRaises(RepositoryLookupError):
            StubGitHubClient({}).list_user_languages("ghost")


if __name__ == "__main__":
    unittest.main()
