from django.contrib import admin

from . import models


class CodingQuestionInline(admin.TabularInline):
    model = models.CodingQuestion
    fields = ("order", "type", "title", "difficulty", "points", "is_active")
    extra = 0


class TestCaseInline(admin.TabularInline):
    model = models.TestCase
    fields = ("order", "input", "output", "is_hidden", "is_sample", "points")
    extra = 0


@admin.register(models.CodingContest)
class CodingContestAdmin(admin.ModelAdmin):
    list_display = ("title", "organization", "status", "visibility", "start_time", "end_time")
    list_filter = ("status", "visibility", "proctor_enabled")
    search_fields = ("title", "slug", "organization__name")
    inlines = [CodingQuestionInline]


@admin.register(models.CodingQuestion)
class CodingQuestionAdmin(admin.ModelAdmin):
    list_display = ("title", "contest", "type", "difficulty", "points", "order", "is_active")
    list_filter = ("type", "difficulty", "is_active")
    search_fields = ("title", "contest__title")
    inlines = [TestCaseInline]


@admin.register(models.ContestParticipant)
class ContestParticipantAdmin(admin.ModelAdmin):
    list_display = ("user", "contest", "status", "total_score", "tab_switch_count", "is_disqualified")
    list_filter = ("status", "is_disqualified")
    search_fields = ("user__email", "contest__title")


@admin.register(models.QuestionSubmission)
class QuestionSubmissionAdmin(admin.ModelAdmin):
    list_display = ("participant", "question", "language", "is_correct", "score", "attempt_number", "submitted_at")
    list_filter = ("is_correct", "language")


@admin.register(models.ProctorViolation)
class ProctorViolationAdmin(admin.ModelAdmin):
    list_display = ("participant", "type", "timestamp")
    list_filter = ("type",)
