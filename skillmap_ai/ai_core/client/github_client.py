from __future__ import annotations

import base64
import binascii
import json
import logging
from typing import Any, List, Optional, Tuple
from urllib import error, request
from urllib.parse import quote, urlparse

from skillmap_ai.ai_core.common.exceptions import InvalidRepositoryUrl, RepositoryLookupError
from skillmap_ai.ai_core.domain.repository_manifest import RepositoryManifest

logger = logging.getLogger(__name__)

# 매니페스트 탐색 순서 (경로, 생태계)
MANIFEST_CANDIDATES: Tuple[Tuple[str, str], ...] = (
    ("package.json", "JavaScript/TypeScript"),
    ("go.mod", "Go"),
    ("requirements.txt", "Python"),
)

_GITHUB_HOSTS = {"github.com", "www.github.com"}


def parse_repository_url(url: str) -> Tuple[str, str]:
    """
    GitHub 저장소 URL에서 owner/name을 추출합니다.

    `https://github.com/<owner>/<repo>`, 스킴 생략, `.git` 접미사, 뒤따르는 경로
    (`/tree/main` 등)를 허용합니다.

    @param {str} url - 사용자가 입력한 저장소 URL.
    @returns {Tuple[str, str]} (owner, repo).
    @raises InvalidRepositoryUrl - GitHub 저장소 URL 형식이 아닌 경우.
    """
    cleaned = (url or "").strip()
    if not cleaned:
        raise InvalidRepositoryUrl("저장소 URL이 비어 있습니다.")
    if "://" not in cleaned:
        cleaned = f"https://{cleaned}"
    parsed = urlparse(cleaned)
    if parsed.netloc.lower() not in _GITHUB_HOSTS:
        raise InvalidRepositoryUrl(f"GitHub 저장소 URL이 아닙니다: {url}")
    parts = [part for part in parsed.path.split("/") if part]
    if len(parts) < 2:
        raise InvalidRepositoryUrl(f"owner/repo를 찾을 수 없습니다: {url}")
    owner, repo = parts[0], parts[1]
    if repo.endswith(".git"):
        repo = repo[: -len(".git")]
    if not owner or not repo:
        raise InvalidRepositoryUrl(f"owner/repo를 찾을 수 없습니다: {url}")
    return owner, repo


class GitHubClient:
    """GitHub REST v3 조회 클라이언트 (저장소 존재 확인, 파일 조회, 언어 수집)."""

    def __init__(
        self,
        token: str = "",
        api_url: str = "https://api.github.com",
        timeout: int = 10,
    ) -> None:
        self._token = token
        self._api_url = api_url.rstrip("/")
        self._timeout = timeout

    def available(self) -> bool:
        return bool(self._api_url)

    def repository_exists(self, owner: str, repo: str) -> bool:
        """
        @param {str} owner - 저장소 소유자.
        @param {str} repo - 저장소 이름.
        @returns {bool} 저장소가 존재하면 True, 404면 False.
        @raises RepositoryLookupError - 그 외 HTTP/네트워크 오류.
        """
        status, _ = self._get_json(f"/repos/{quote(owner)}/{quote(repo)}")
        if status == 404:
            return False
        if status != 200:
            raise RepositoryLookupError(f"GitHub 응답 상태 {status}")
        return True

    def fetch_file(self, owner: str, repo: str, path: str) -> Optional[str]:
        """
        저장소 기본 브랜치의 파일 내용을 반환합니다.

        @returns {Optional[str]} UTF-8 파일 내용. 파일이 없거나 조회에 실패하면 None.
        """
        try:
            status, payload = self._get_json(f"/repos/{quote(owner)}/{quote(repo)}/contents/{path}")
        except RepositoryLookupError as exc:
            logger.warning("GitHub 파일 조회 실패", extra={"repo": f"{owner}/{repo}", "path": path, "error": str(exc)})
            return None
        if status != 200 or not isinstance(payload, dict):
            return None
        content = payload.get("content")
        if not isinstance(content, str):
            return None
        try:
            return base64.b64decode(content).decode("utf-8")
        except (binascii.Error, UnicodeDecodeError):
            return None

    def detect_manifest(self, owner: str, repo: str) -> Optional[RepositoryManifest]:
        """
        지원하는 매니페스트를 MANIFEST_CANDIDATES 순서로 탐색합니다.

        @returns {Optional[RepositoryManifest]} 처음 발견한 매니페스트 또는 None.
        """
        for path, ecosystem in MANIFEST_CANDIDATES:
            content = self.fetch_file(owner, repo, path)
            if content:
                logger.info("매니페스트 감지", extra={"repo": f"{owner}/{repo}", "path": path})
                return RepositoryManifest(owner=owner, name=repo, path=path, ecosystem=ecosystem, content=content)
        return None

    def list_user_languages(self, username: str, limit: int = 10) -> List[str]:
        """
        최근 수정된 저장소들의 주 언어를 중복 없이 수집합니다.

        @param {str} username - GitHub 사용자명.
        @param {int} limit - 조회할 저장소 수.
        @returns {List[str]} 처음 등장한 순서의 언어 목록.
        @raises RepositoryLookupError - 사용자 조회 실패.
        """
        status, payload = self._get_json(f"/users/{quote(username)}/repos?sort=updated&per_page={limit}")
        if status != 200 or not isinstance(payload, list):
            raise RepositoryLookupError(f"GitHub 사용자 저장소 조회 실패 (상태 {status})")
        languages: List[str] = []
        for repo in payload:
            language = repo.get("language") if isinstance(repo, dict) else None
            if language and language not in languages:
                languages.append(language)
        return languages

    def _get_json(self, path: str) -> Tuple[int, Any]:
        """
        GET 요청을 보내고 (상태 코드, JSON 본문)을 반환합니다.

        4xx/5xx는 상태 코드로 돌려주고, 연결 실패는 RepositoryLookupError로 던집니다.
        """
        headers = {"Accept": "application/vnd.github.v3+json", "User-Agent": "skillmap-ai"}
        if self._token:
            headers["Authorization"] = f"token {self._token}"
        req = request.Request(f"{self._api_url}{path}", headers=headers)
        try:
            with request.urlopen(req, timeout=self._timeout) as response:
                status = response.status
                raw = response.read().decode("utf-8")
        except error.HTTPError as exc:
            return exc.code, None
        except (error.URLError, TimeoutError) as exc:
            raise RepositoryLookupError(str(exc)) from exc
        try:
            return status, json.loads(raw)
        except json.JSONDecodeError:
            return status, None
