from django.db import models
from django.utils import timezone

from skillmap_ai.ai_core.repository.roadmap_store import generate_roadmap_id


class RoadmapRecord(models.Model):
    """학습 로드맵 문서 (노드/엣지는 JSON 컬럼으로 통째로 저장)."""

    roadmap_id = models.CharField(
        max_length=50,
        primary_key=True,
        default=generate_roadmap_id,
        editable=False
    )
    owner_id = models.CharField(max_length=100, db_index=True, help_text="소유 사용자 ID")
    domain_label = models.CharField(max_length=255, help_text="로드맵이 다루는 주제")
    kind = models.CharField(
        max_length=30,
        choices=[
            ("standard", "Standard"),
            ("resume-derived", "Resume derived"),
            ("repository-derived", "Repository derived"),
        ],
        default="standard",
        help_text="생성 경로"
    )
    nodes = models.JSONField(default=list, help_text="노드 레코드 목록 (표시 순서)")
    edges = models.JSONField(default=list, help_text="엣지 레코드 목록")
    version = models.PositiveIntegerField(default=1, help_text="낙관적 동시성 버전")
    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "ai_roadmap"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["owner_id", "-created_at"], name="ai_roadmap_owner_i_6f1c2d_idx"),
        ]

    def __str__(self):
        return f"{self.roadmap_id} ({self.owner_id})"
