import unittest
from unittest import mock

from skillmap_ai.ai_core.tests.django_support import setup_django

setup_django()

from django.core.files.uploadedfile import SimpleUploadedFile  # noqa: E402
from django.test import SimpleTestCase  # noqa: E402
from rest_framework.test import APIClient  # noqa: E402

from skillmap_ai.ai_core.common.exceptions import GenerationFailure  # noqa: E402
from skillmap_ai.ai_core.config.model_router import ModelRouter  # noqa: E402
from skillmap_ai.ai_core.config.roadmap_settings import get_roadmap_settings  # noqa: E402
from skillmap_ai.ai_core.controller import dependencies  # noqa: E402
from skillmap_ai.ai_core.repository import InMemoryRoadmapStore  # noqa: E402
from skillmap_ai.ai_core.service.graph.roadmap_generator import RoadmapGeneratorService  # noqa: E402
from skillmap_ai.ai_core.service.progress.progression_engine import ProgressionEngine  # noqa: E402
from skillmap_ai.ai_core.service.roadmap_management.roadmap_service import RoadmapService  # noqa: E402
from skillmap_ai.ai_core.tests.fakes import (  # noqa: E402
    ENRICHMENT_REPLY,
    STRUCTURE_REPLY,
    FakeGenerationClient,
    FakeGitHubClient,
    chain_graph,
    fixed_clock,
    make_pdf,
)

BASE = "/api/v1"


class RoadmapApiTests(SimpleTestCase):
    def setUp(self) -> None:
        self.client_fake = FakeGenerationClient([STRUCTURE_REPLY, ENRICHMENT_REPLY])
        self.github = FakeGitHubClient(languages=["Python", "TypeScript"], exists=True)
        self.store = InMemoryRoadmapStore()
        generator = RoadmapGeneratorService(
            self.client_fake,
            router=ModelRouter(default_model="flash", analysis_model="pro"),
            clock=fixed_clock(),
        )
        engine = ProgressionEngine(repository_checker=self.github)
        dependencies.set_roadmap_service(RoadmapService(generator, self.store, engine, github_client=self.github))
        self.api = APIClient()
        self.api.credentials(HTTP_X_USER_ID="alice")

    def tearDown(self) -> None:
        dependencies.set_roadmap_service(None)

    def test_health_check_needs_no_user(self) -> None:
        response = APIClient().get(f"{BASE}/health/")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["status"], "ok")
        self.assertIn("store_backend", response.json()["services"])

    def test_schema_is_public_and_lists_routes(self) -> None:
        response = APIClient().get(f"{BASE}/schema/", {"format": "json"})
        self.assertEqual(response.status_code, 200)
        self.assertIn(b"/api/v1/roadmap/generate", response.content)
        self.assertIn(b"UserIdHeader", response.content)

    def test_missing_user_header(self) -> None:
        response = APIClient().get(f"{BASE}/roadmap/all")
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json()["error"], "authentication_required")

    def test_generate_then_read(self) -> None:
        """
        생성 → 단건 조회 → 목록 → 최근 로드맵 흐름을 검증합니다.

        @returns {None} 테스트만 수행합니다.
        """
        response = self.api.post(f"{BASE}/roadmap/generate", {"domain": "Backend", "verified_skills": ["X"]}, format="json")
        self.assertEqual(response.status_code, 201)
        body = response.json()
        self.assertEqual(body["owner_id"], "alice")
        self.assertEqual([node["status"] for node in body["nodes"]], ["completed", "pending"])
        self.assertEqual(body["nodes"][1]["estimated_time"], "2 Days")

        detail = self.api.get(f"{BASE}/roadmap/{body['id']}")
        self.assertEqual(detail.status_code, 200)
        self.assertEqual(detail.json()["id"], body["id"])

        listing = self.api.get(f"{BASE}/roadmap/all").json()
        self.assertEqual([item["id"] for item in listing], [body["id"]])
        self.assertEqual(listing[0]["completed_count"], 1)

        latest = self.api.get(f"{BASE}/roadmap/view")
        self.assertEqual(latest.json()["id"], body["id"])

    def test_other_user_gets_not_found(self) -> None:
        roadmap_id = self.store.create(chain_graph(owner_id="alice"))
        other = APIClient()
        other.credentials(HTTP_X_USER_ID="bob")
        response = other.get(f"{BASE}/roadmap/{roadmap_id}")
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json()["error"], "roadmap_not_found")

    def test_generate_validation_error(self) -> None:
        response = self.api.post(f"{BASE}/roadmap/generate", {}, format="json")
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["error"], "invalid")
        self.assertIn("domain", response.json()["details"])

    def test_generation_failure_is_bad_gateway(self) -> None:
        self.client_fake._replies[:] = [GenerationFailure("503", attempts=3, transient=True)]
        response = self.api.post(f"{BASE}/roadmap/generate", {"domain": "Backend"}, format="json")
        self.assertEqual(response.status_code, 502)
        self.assertEqual(response.json()["error"], "generation_failure")
        self.assertEqual(self.store.size(), 0)

    def test_resume_text_generation(self) -> None:
        response = self.api.post(
            f"{BASE}/resume/analyse",
            {"domain": "Data Engineer", "resume_text": "SQL and Airflow"},
            format="json",
        )
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.json()["kind"], "resume-derived")

    def test_resume_pdf_upload(self) -> None:
        """
        업로드한 PDF의 텍스트가 구조 프롬프트까지 전달되는지 검증합니다.

        @returns {None} 테스트만 수행합니다.
        """
        upload = SimpleUploadedFile("resume.pdf", make_pdf("Python Django"), content_type="application/pdf")
        response = self.api.post(
            f"{BASE}/resume/analyse",
            {"domain": "Backend", "resume": upload},
            format="multipart",
        )
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.json()["kind"], "resume-derived")
        structure_prompt = self.client_fake.calls[0][0]
        self.assertIn("Python", structure_prompt)
        self.assertIn("Django", structure_prompt)

    def test_resume_upload_rejects_non_pdf(self) -> None:
        upload = SimpleUploadedFile("resume.txt", b"Python Django", content_type="text/plain")
        response = self.api.post(
            f"{BASE}/resume/analyse",
            {"domain": "Backend", "resume": upload},
            format="multipart",
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["error"], "invalid")
        self.assertIn("resume", response.json()["details"])
        self.assertEqual(self.client_fake.calls, [])

    def test_resume_upload_rejects_oversized_file(self) -> None:
        upload = SimpleUploadedFile("resume.pdf", make_pdf("Python Django"), content_type="application/pdf")
        with mock.patch.object(get_roadmap_settings(), "RESUME_MAX_UPLOAD_BYTES", 10):
            response = self.api.post(
                f"{BASE}/resume/analyse",
                {"domain": "Backend", "resume": upload},
                format="multipart",
            )
        self.assertEqual(response.status_code, 400)
        self.assertIn("resume", response.json()["details"])
        self.assertEqual(self.store.size(), 0)

    def test_unreadable_pdf_upload(self) -> None:
        upload = SimpleUploadedFile("resume.pdf", b"not a pdf", content_type="application/pdf")
        response = self.api.post(
            f"{BASE}/resume/analyse",
            {"domain": "Backend", "resume": upload},
            format="multipart",
        )
        self.assertEqual(response.status_code, 422)
        self.assertEqual(response.json()["error"], "resume_unreadable")
        self.assertEqual(self.client_fake.calls, [])

    def test_malformed_enrichment_reports_cause(self) -> None:
        self.client_fake._replies[:] = [STRUCTURE_REPLY, "no json here"]
        response = self.api.post(f"{BASE}/roadmap/generate", {"domain": "Backend"}, format="json")
        self.assertEqual(response.status_code, 502)
        self.assertEqual(response.json()["error"], "enrichment_failure")
        self.assertEqual(response.json()["details"]["cause"], "malformed_response")
        self.assertEqual(self.store.size(), 0)

    def test_resume_requires_file_or_text(self) -> None:
        response = self.api.post(f"{BASE}/resume/analyse", {"domain": "Data Engineer"}, format="json")
        self.assertEqual(response.status_code, 400)

    def test_update_status_and_errors(self) -> None:
        roadmap_id = self.store.create(chain_graph(owner_id="alice"))
        url = f"{BASE}/roadmap/update"

        response = self.api.put(url, {"roadmap_id": roadmap_id, "node_id": "A", "status": "completed"}, format="json")
        self.assertEqual(response.status_code, 200)
        self.assertEqual([node["status"] for node in response.json()["nodes"]], ["completed", "pending", "locked"])
        self.assertEqual(response.json()["version"], 2)

        cases = [
            ({"node_id": "A", "status": "done"}, 400, "invalid_status"),
            ({"node_id": "A", "status": "pending"}, 409, "invalid_transition"),
            ({"node_id": "Z", "status": "completed"}, 404, "node_not_found"),
        ]
        for payload, expected_status, expected_error in cases:
            with self.subTest(payload=payload):
                response = self.api.put(url, {"roadmap_id": roadmap_id, **payload}, format="json")
                self.assertEqual(response.status_code, expected_status)
                self.assertEqual(response.json()["error"], expected_error)

    def test_verify_node(self) -> None:
        roadmap_id = self.store.create(chain_graph(owner_id="alice"))
        url = f"{BASE}/roadmap/verify-node"

        bad = self.api.post(url, {"roadmap_id": roadmap_id, "node_id": "A", "github_repo_url": "gitlab.com/a/b"}, format="json")
        self.assertEqual(bad.status_code, 422)
        self.assertEqual(bad.json()["error"], "verification_failed")

        ok = self.api.post(
            url,
            {"roadmap_id": roadmap_id, "node_id": "A", "github_repo_url": "https://github.com/alice/demo"},
            format="json",
        )
        self.assertEqual(ok.status_code, 200)
        self.assertEqual(ok.json()["nodes"][0]["status"], "completed")

    def test_github_skills(self) -> None:
        response = self.api.post(f"{BASE}/github/skills", {"github_username": "octo"}, format="json")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["verified_skills"], ["Python", "TypeScript"])

    def test_next_question(self) -> None:
        response = self.api.post(f"{BASE}/questions/next", {"domain": "frontend_react"}, format="json")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["difficulty"], 2)
        self.assertFalse(response.json()["fallback"])

        empty = self.api.post(f"{BASE}/questions/next", {"domain": "unknown"}, format="json")
        self.assertEqual(empty.status_code, 204)


if __name__ == "__main__":
    unittest.main()
