from rest_framework import serializers

from .judge import LANGUAGE_IDS
from .models import CodingQuestion, ContestParticipant, ProctorViolation, QuestionSubmission, TestCase, TestCaseResult


# ---------------------- Requests ----------------------

class MCQAnswerSerializer(serializers.Serializer):
    question_id = serializers.IntegerField()
    selected_options = serializers.ListField(
        child=serializers.CharField(max_length=20),
        min_length=1,
        max_length=10,
    )


class CodeSubmissionSerializer(serializers.Serializer):
    question_id = serializers.IntegerField()
    code = serializers.CharField(max_length=100_000, trim_whitespace=False)
    language = serializers.ChoiceField(choices=sorted(LANGUAGE_IDS))


class RunCodeSerializer(serializers.Serializer):
    code = serializers.CharField(max_length=100_000, trim_whitespace=False)
    language = serializers.ChoiceField(choices=sorted(LANGUAGE_IDS))
    input = serializers.CharField(max_length=100_000, required=False, allow_blank=True, trim_whitespace=False)


class ViolationSerializer(serializers.Serializer):
    type = serializers.ChoiceField(choices=ProctorViolation.Type.choices)
    details = serializers.CharField(max_length=1000, required=False, allow_blank=True)


class StartContestSerializer(serializers.Serializer):
    browser_info = serializers.DictField(required=False)


# ---------------------- Responses ----------------------

class TestCaseSerializer(serializers.ModelSerializer):
    class Meta:
        model = TestCase
        fields = ["id", "input", "output", "is_sample", "points", "order", "explanation"]


class QuestionSerializer(serializers.ModelSerializer):
    options = serializers.SerializerMethodField()
    test_cases = serializers.SerializerMethodField()

    class Meta:
        model = CodingQuestion
        fields = [
            "id",
            "type",
            "title",
            "description",
            "difficulty",
            "points",
            "order",
            "time_limit",
            "memory_limit",
            "tags",
            "options",
            "allow_multiple",
            "starter_code",
            "constraints",
            "input_format",
            "output_format",
            "sample_input",
            "sample_output",
            "hints",
            "test_cases",
        ]

    def get_options(self, obj):
        # Never reveal which option is correct.
        return [{"id": option.get("id"), "text": option.get("text")} for option in obj.options or []]

    def get_test_cases(self, obj):
        test_cases = getattr(obj, "visible_test_cases", None)
        if test_cases is None:
            test_cases = obj.test_cases.filter(is_hidden=False)
        return TestCaseSerializer(test_cases, many=True).data


class TestCaseResultSerializer(serializers.ModelSerializer):
    class Meta:
        model = TestCaseResult
        fields = ["test_case_index", "passed", "status", "execution_time", "memory_used", "error"]


class QuestionSubmissionSerializer(serializers.ModelSerializer):
    question_title = serializers.CharField(source="question.title", read_only=True)
    test_results = TestCaseResultSerializer(many=True, read_only=True)

    class Meta:
        model = QuestionSubmission
        fields = [
            "id",
            "question",
            "question_title",
            "selected_options",
            "language",
            "is_correct",
            "score",
            "test_cases_passed",
            "test_cases_total",
            "execution_time",
            "attempt_number",
            "submitted_at",
            "test_results",
        ]


class ViolationRecordSerializer(serializers.ModelSerializer):
    class Meta:
        model = ProctorViolation
        fields = ["id", "type", "details", "timestamp"]


class ParticipantSerializer(serializers.ModelSerializer):
    class Meta:
        model = ContestParticipant
        fields = [
            "id",
            "status",
            "started_at",
            "submitted_at",
            "total_score",
            "questions_attempted",
            "questions_correct",
            "tab_switch_count",
            "is_disqualified",
        ]


class LeaderboardEntrySerializer(serializers.Serializer):
    rank = serializers.IntegerField()
    name = serializers.CharField(source="participant.user.display_name")
    total_score = serializers.FloatField(source="participant.total_score")
    questions_correct = serializers.IntegerField(source="participant.questions_correct")
    submitted_at = serializers.DateTimeField(source="participant.submitted_at", allow_null=True)
