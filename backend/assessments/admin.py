from django.contrib import admin

from .models import Attempt, AttemptAnswer, Batch, Question, Test, UserAccount, UserSettings


@admin.register(Batch)
class BatchAdmin(admin.ModelAdmin):
    list_display = ['id', 'name', 'organization_id']
    list_filter = ['organization_id']
    search_fields = ['name']


@admin.register(UserAccount)
class UserAccountAdmin(admin.ModelAdmin):
    list_display = ['user_id', 'full_name', 'email', 'role', 'organization_id', 'batch', 'is_suspended', 'is_active']
    list_filter = ['role', 'organization_id', 'is_suspended', 'is_active']
    search_fields = ['user_id', 'full_name', 'email']


@admin.register(UserSettings)
class UserSettingsAdmin(admin.ModelAdmin):
    list_display = ['user', 'show_on_leaderboard', 'show_stats', 'show_heatmap']
    list_filter = ['show_on_leaderboard']


@admin.register(Question)
class QuestionAdmin(admin.ModelAdmin):
    list_display = ['id', 'subject', 'topic', 'difficulty', 'organization_id']
    list_filter = ['subject', 'difficulty']
    search_fields = ['text', 'topic']


@admin.register(Test)
class TestAdmin(admin.ModelAdmin):
    list_display = ['title', 'organization_id', 'status', 'answer_key_published', 'duration_minutes', 'total_marks', 'created_at']
    list_filter = ['status', 'answer_key_published', 'organization_id']
    search_fields = ['title', 'description']
    ordering = ['-created_at']
    readonly_fields = ['created_at', 'updated_at']


class AttemptAnswerInline(admin.TabularInline):
    model = AttemptAnswer
    extra = 0
    readonly_fields = ['question', 'selected_options', 'answered_at']


@admin.register(Attempt)
class AttemptAdmin(admin.ModelAdmin):
    list_display = ['id', 'user', 'test', 'status', 'score', 'correct', 'incorrect', 'unanswered', 'started_at', 'submitted_at']
    list_filter = ['status', 'test']
    search_fields = ['user__user_id', 'user__full_name', 'test__title']
    ordering = ['-started_at']
    inlines = [AttemptAnswerInline]
