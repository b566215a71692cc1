from skillmap_ai.ai_core.client.gemini_client import GeminiClient
from skillmap_ai.ai_core.common.retry_policy import RetryPolicy
from skillmap_ai.ai_core.config.roadmap_settings import get_roadmap_settings
from skillmap_ai.ai_core.domain.generation_context import DomainContext
from skillmap_ai.ai_core.service.graph.graph_normalizer import GraphNormalizer
from skillmap_ai.ai_core.service.graph.prompt_builder import PromptBuilder
from skillmap_ai.ai_core.service.graph.response_parser import parse_json_object


def main() -> None:
    """
    Gemini API로 구조 프롬프트 한 번을 보내 파싱/정규화까지 확인합니다.

    @returns {None} 표준 출력으로 결과를 표시합니다.
    """
    settings = get_roadmap_settings()
    api_key = settings.secret("GEMINI_API_KEY")
    if not api_key:
        raise SystemExit("GEMINI_API_KEY 환경 변수가 필요합니다.")

    client = GeminiClient(
        api_key=api_key,
        model=settings.AI_DEFAULT_MODEL,
        retry_policy=RetryPolicy(max_attempts=settings.AI_RETRY_MAX_ATTEMPTS, base_delay=settings.retry_base_delay_seconds),
    )
    prompt = PromptBuilder().structure_prompt(DomainContext(domain="Backend Developer", verified_skills=["Python"]))
    structure = GraphNormalizer().normalize(parse_json_object(client.call(prompt)))
    for node in structure.nodes:
        print(f"{node.node_id:>8}  {node.status.value:<9}  {node.label}")
    for edge in structure.edges:
        print(f"{edge.source} -> {edge.target}")


if __name__ == "__main__":
    main()
