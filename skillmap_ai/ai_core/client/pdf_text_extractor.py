from __future__ import annotations

import logging

import fitz  # PyMuPDF

from skillmap_ai.ai_core.common.exceptions import ResumeExtractionError

logger = logging.getLogger(__name__)


class PdfTextExtractor:
    """PDF 바이트에서 평문을 추출합니다. 공백 정리와 길이 제한은 프롬프트 빌더가 담당합니다."""

    def extract_text(self, data: bytes) -> str:
        """
        @param {bytes} data - PDF 파일 바이트.
        @returns {str} 페이지 텍스트를 공백으로 이어 붙인 문자열.
        @raises ResumeExtractionError - PDF를 열 수 없거나 텍스트가 없는 경우.
        """
        try:
            with fitz.open(stream=data, filetype="pdf") as document:
                pages = [page.get_text() for page in document]
        except (fitz.FileDataError, RuntimeError, ValueError) as exc:
            logger.warning("PDF 파싱 실패", extra={"error": str(exc)})
            raise ResumeExtractionError("PDF를 읽지 못했습니다.") from exc
        text = " ".join(pages).strip()
        if not text:
            raise ResumeExtractionError("PDF에서 텍스트를 찾지 못했습니다.")
        return text
