import unittest

from skillmap_ai.ai_core.domain.generation_context import DomainContext, RepositoryContext, ResumeContext
from skillmap_ai.ai_core.domain.roadmap_node import RoadmapNode
from skillmap_ai.ai_core.domain.node_status import NodeStatus
from skillmap_ai.ai_core.service.graph.prompt_builder import TRUNCATION_MARKER, PromptBuilder, truncate_resume


class PromptBuilderTests(unittest.TestCase):
    def setUp(self) -> None:
        self.builder = PromptBuilder(resume_max_chars=50)

    def test_domain_structure_prompt_lists_skills_and_status_rules(self) -> None:
        prompt = self.builder.structure_prompt(DomainContext("Backend Developer", ["Python", " ", "SQL"]))
        self.assertIn('"Backend Developer"', prompt)
        self.assertIn("[Python, SQL]", prompt)
        self.assertIn("10-15", prompt)
        for status in ("completed", "pending", "locked"):
            self.assertIn(f'"status": "{status}"', prompt)

    def test_resume_prompt_is_truncated_with_marker(self) -> None:
        resume = "Python developer.\n\n" + "x" * 200
        prompt = self.builder.structure_prompt(ResumeContext("Data Engineer", resume))
        self.assertIn("Python developer. " + "x" * (50 - len("Python developer. ")) + TRUNCATION_MARKER, prompt)
        self.assertNotIn("x" * 100, prompt)

    def test_repository_prompt_includes_manifest(self) -> None:
        context = RepositoryContext("octo", "app", "Go", "module example.com/app\nrequire github.com/gin-gonic/gin v1.9.0")
        prompt = self.builder.structure_prompt(context)
        self.assertIn("octo/app", prompt)
        self.assertIn("gin-gonic", prompt)
        self.assertIn('("Go")', prompt)

    def test_enrichment_prompt_lists_batch_ids(self) -> None:
        batch = [
            RoadmapNode(node_id="1", label="HTTP", status=NodeStatus.COMPLETED),
            RoadmapNode(node_id="2", label="REST"),
        ]
        prompt = self.builder.enrichment_prompt(DomainContext("Backend"), batch)
        self.assertIn("- ID: 1, Topic: HTTP, Status: completed", prompt)
        self.assertIn("- ID: 2, Topic: REST, Status: locked", prompt)
        self.assertIn("estimatedTime", prompt)
        self.assertIn("projectIdea", prompt)

    def test_repository_enrichment_asks_why_used(self) -> None:
        prompt = self.builder.enrichment_prompt(
            RepositoryContext("octo", "app", "Python", "django"),
            [RoadmapNode(node_id="1", label="Django ORM")],
        )
        self.assertIn("WHY", prompt)

    def test_prompts_are_deterministic(self) -> None:
        context = DomainContext("Frontend", ["HTML"])
        self.assertEqual(self.builder.structure_prompt(context), self.builder.structure_prompt(context))

    def test_truncate_resume_keeps_short_text(self) -> None:
        self.assertEqual(truncate_resume("  short   text ", 100), "short text")


if __name__ == "__main__":
    unittest.main()
