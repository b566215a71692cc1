import django.utils.timezone
from django.db import migrations, models

import skillmap_ai.ai_core.repository.roadmap_store


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="RoadmapRecord",
            fields=[
                (
                    "roadmap_id",
                    models.CharField(
                        default=skillmap_ai.ai_core.repository.roadmap_store.generate_roadmap_id,
                        editable=False,
                        max_length=50,
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                ("owner_id", models.CharField(db_index=True, help_text="소유 사용자 ID", max_length=100)),
                ("domain_label", models.CharField(help_text="로드맵이 다루는 주제", max_length=255)),
                (
                    "kind",
                    models.CharField(
                        choices=[
                            ("standard", "Standard"),
                            ("resume-derived", "Resume derived"),
                            ("repository-derived", "Repository derived"),
                        ],
                        default="standard",
                        help_text="생성 경로",
                        max_length=30,
                    ),
                ),
                ("nodes", models.JSONField(default=list, help_text="노드 레코드 목록 (표시 순서)")),
                ("edges", models.JSONField(default=list, help_text="엣지 레코드 목록")),
                ("version", models.PositiveIntegerField(default=1, help_text="낙관적 동시성 버전")),
                ("created_at", models.DateTimeField(default=django.utils.timezone.now)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "db_table": "ai_roadmap",
                "ordering": ["-created_at"],
                "indexes": [models.Index(fields=["owner_id", "-created_at"], name="ai_roadmap_owner_i_6f1c2d_idx")],
            },
        ),
    ]
