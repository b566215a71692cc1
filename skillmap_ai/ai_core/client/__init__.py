# =============================================================================
# 외부 협력자 클라이언트 모듈
# =============================================================================
# 지원 서비스:
#   - Gemini: 로드맵 구조/상세 생성 (google-genai)
#   - GitHub: 저장소 존재 확인, 매니페스트 조회, 사용자 언어 수집
#   - PDF: 이력서 텍스트 추출 (PyMuPDF)
# =============================================================================

from __future__ import annotations

from skillmap_ai.ai_core.client.gemini_client import GeminiClient, GeminiModel, GenerationConfig
from skillmap_ai.ai_core.client.generation_client import GenerationClient
from skillmap_ai.ai_core.client.github_client import (
    MANIFEST_CANDIDATES,
    GitHubClient,
    parse_repository_url,
)
from skillmap_ai.ai_core.client.pdf_text_extractor import PdfTextExtractor

__all__ = [
    "GeminiClient",
    "GeminiModel",
    "GenerationClient",
    "GenerationConfig",
    "GitHubClient",
    "MANIFEST_CANDIDATES",
    "PdfTextExtractor",
    "parse_repository_url",
]
