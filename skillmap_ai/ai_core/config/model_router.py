from dataclasses import dataclass

from skillmap_ai.ai_core.domain.node_status import RoadmapKind


@dataclass(frozen=True)
class RoutingDecision:
    """모델 라우팅 결과."""

    model_name: str
    reason: str


class ModelRouter:
    """생성 경로와 입력 길이에 따라 모델을 선택하는 라우터."""

    def __init__(
        self,
        default_model: str = "gemini-2.5-flash",
        analysis_model: str = "gemini-2.5-pro",
        long_prompt_chars: int = 6000,
    ) -> None:
        """
        @param default_model 도메인 기반 생성에 쓰는 기본 모델.
        @param analysis_model 이력서/저장소 분석 또는 긴 입력에 쓰는 모델.
        @param long_prompt_chars 분석 모델로 전환하는 프롬프트 길이 기준.
        @returns None
        """
        self._default = default_model
        self._analysis = analysis_model
        self._long_prompt_chars = long_prompt_chars

    def route(self, kind: RoadmapKind, prompt_length: int) -> RoutingDecision:
        """
        @param kind 로드맵 생성 경로.
        @param prompt_length 구조 프롬프트 길이.
        @returns 선택된 모델과 선택 이유를 포함한 라우팅 결과.
        """
        if kind is RoadmapKind.RESUME:
            return RoutingDecision(model_name=self._analysis, reason="resume_analysis")
        if kind is RoadmapKind.REPOSITORY:
            return RoutingDecision(model_name=self._analysis, reason="repository_analysis")
        if prompt_length > self._long_prompt_chars:
            return RoutingDecision(model_name=self._analysis, reason="long_prompt")
        return RoutingDecision(model_name=self._default, reason="default")
