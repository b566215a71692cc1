from __future__ import annotations

from rest_framework import serializers

from skillmap_ai.ai_core.domain.node_status import NodeStatus

STATUS_CHOICES = [status.value for status in NodeStatus]


# -----------------------------------------------------------------------------
# 요청
# -----------------------------------------------------------------------------

class GenerateRoadmapRequestSerializer(serializers.Serializer):
    domain = serializers.CharField(max_length=200, trim_whitespace=True)
    verified_skills = serializers.ListField(
        child=serializers.CharField(max_length=100),
        required=False,
        default=list,
    )


class ResumeAnalyseRequestSerializer(serializers.Serializer):
    """`resume`(PDF 파일)와 `resume_text` 중 하나는 반드시 필요합니다."""

    domain = serializers.CharField(max_length=200, trim_whitespace=True)
    resume = serializers.FileField(required=False)
    resume_text = serializers.CharField(required=False, allow_blank=False)
    verified_skills = serializers.ListField(
        child=serializers.CharField(max_length=100),
        required=False,
        default=list,
    )

    def validate_resume(self, value):
        name = (getattr(value, "name", "") or "").lower()
        content_type = getattr(value, "content_type", "") or ""
        if not name.endswith(".pdf") and content_type != "application/pdf":
            raise serializers.ValidationError("PDF 파일만 업로드할 수 있습니다.")
        max_bytes = self.context.get("max_upload_bytes")
        if max_bytes and value.size > max_bytes:
            raise serializers.ValidationError(f"파일 크기는 {max_bytes} 바이트 이하여야 합니다.")
        return value

    def validate(self, attrs):
        if not attrs.get("resume") and not attrs.get("resume_text"):
            raise serializers.ValidationError("resume 파일 또는 resume_text가 필요합니다.")
        return attrs


class RepositoryDecodeRequestSerializer(serializers.Serializer):
    repo_url = serializers.CharField(max_length=500, trim_whitespace=True)


class NodeStatusUpdateRequestSerializer(serializers.Serializer):
    roadmap_id = serializers.CharField(max_length=50)
    node_id = serializers.CharField(max_length=100)
    status = serializers.CharField(max_length=20)


class VerifyNodeRequestSerializer(serializers.Serializer):
    roadmap_id = serializers.CharField(max_length=50)
    node_id = serializers.CharField(max_length=100)
    github_repo_url = serializers.CharField(max_length=500)


class GithubSkillsRequestSerializer(serializers.Serializer):
    github_username = serializers.RegexField(r"^[A-Za-z0-9](?:[A-Za-z0-9-]{0,38})$")


class NextQuestionRequestSerializer(serializers.Serializer):
    domain = serializers.CharField(max_length=100)
    current_difficulty = serializers.IntegerField(min_value=1, max_value=3, required=False, default=2)
    previous_was_correct = serializers.BooleanField(required=False, default=False)
    answered_question_ids = serializers.ListField(
        child=serializers.CharField(max_length=100),
        required=False,
        default=list,
    )


# -----------------------------------------------------------------------------
# 응답
# -----------------------------------------------------------------------------

class NodeResourceSerializer(serializers.Serializer):
    title = serializers.CharField(allow_blank=True)
    url = serializers.CharField(allow_blank=True)


class NodePositionSerializer(serializers.Serializer):
    x = serializers.FloatField()
    y = serializers.FloatField()


class RoadmapNodeSerializer(serializers.Serializer):
    id = serializers.CharField()
    kind = serializers.CharField()
    label = serializers.CharField()
    description = serializers.CharField(allow_blank=True)
    estimated_time = serializers.CharField(allow_blank=True)
    resources = NodeResourceSerializer(many=True)
    project_idea = serializers.CharField(allow_blank=True)
    status = serializers.ChoiceField(choices=STATUS_CHOICES)
    position = NodePositionSerializer()


class RoadmapEdgeSerializer(serializers.Serializer):
    id = serializers.CharField()
    source = serializers.CharField()
    target = serializers.CharField()


class RoadmapGraphSerializer(serializers.Serializer):
    id = serializers.CharField()
    owner_id = serializers.CharField()
    domain_label = serializers.CharField()
    kind = serializers.CharField()
    nodes = RoadmapNodeSerializer(many=True)
    edges = RoadmapEdgeSerializer(many=True)
    created_at = serializers.CharField()
    version = serializers.IntegerField()


class RoadmapSummarySerializer(serializers.Serializer):
    id = serializers.CharField()
    domain_label = serializers.CharField()
    kind = serializers.CharField()
    created_at = serializers.CharField()
    node_count = serializers.IntegerField()
    completed_count = serializers.IntegerField()
    progress = serializers.FloatField()
    status_counts = serializers.DictField(child=serializers.IntegerField())


class GithubSkillsSerializer(serializers.Serializer):
    github_username = serializers.CharField()
    verified_skills = serializers.ListField(child=serializers.CharField())


class AssessmentQuestionSerializer(serializers.Serializer):
    id = serializers.CharField()
    domain = serializers.CharField()
    question = serializers.CharField()
    options = serializers.ListField(child=serializers.CharField())
    difficulty = serializers.IntegerField()
    fallback = serializers.BooleanField()


class ErrorSerializer(serializers.Serializer):
    error = serializers.CharField()
    message = serializers.CharField()
    details = serializers.JSONField(required=False)


class HealthCheckServiceSerializer(serializers.Serializer):
    gemini = serializers.BooleanField()
    github = serializers.BooleanField()
    store_backend = serializers.CharField()


class HealthCheckSerializer(serializers.Serializer):
    status = serializers.CharField()
    version = serializers.CharField()
    services = HealthCheckServiceSerializer()
    timestamp = serializers.CharField()
