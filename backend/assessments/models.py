from django.db import models
from django.db.models import Q
from django.utils import timezone


class Batch(models.Model):
    """
    A cohort of students inside an organization.
    Batch-scoped leaderboards and test availability are keyed on it.
    """
    id = models.AutoField(primary_key=True)
    name = models.TextField(null=False)
    organization_id = models.CharField(max_length=64, db_index=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'batches'
        verbose_name = 'Batch'
        verbose_name_plural = 'Batches'

    def __str__(self):
        return f"{self.name} ({self.organization_id})"


class UserAccount(models.Model):
    """
    Authenticated principal of the platform (student, teacher or admin).
    Identity itself is issued elsewhere; tokens carry `user_id`, which is the primary key here.
    """
    ROLE_STUDENT = 'student'
    ROLE_TEACHER = 'teacher'
    ROLE_ADMIN = 'admin'
    ROLE_CHOICES = [
        (ROLE_STUDENT, 'Student'),
        (ROLE_TEACHER, 'Teacher'),
        (ROLE_ADMIN, 'Admin'),
    ]

    user_id = models.CharField(max_length=64, primary_key=True)
    full_name = models.TextField(null=False)
    email = models.EmailField(null=True, blank=True)
    role = models.CharField(max_length=16, choices=ROLE_CHOICES, default=ROLE_STUDENT)
    organization_id = models.CharField(max_length=64, db_index=True)
    batch = models.ForeignKey(
        Batch,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='members',
        db_column='batch_id'
    )
    is_suspended = models.BooleanField(default=False)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'user_accounts'
        verbose_name = 'User Account'
        verbose_name_plural = 'User Accounts'
        indexes = [
            models.Index(fields=['organization_id', 'role'], name='user_accoun_organiz_5b1f7d_idx'),
            models.Index(fields=['batch'], name='user_accoun_batch_i_9e2c40_idx'),
        ]

    def __str__(self):
        return f"{self.user_id} - {self.full_name}"

    @property
    def is_admin(self):
        return self.role == self.ROLE_ADMIN

    # Authentication properties required by Django's permission system
    @property
    def is_authenticated(self):
        return True

    @property
    def is_anonymous(self):
        return False

    @property
    def is_staff(self):
        return False

    @property
    def is_superuser(self):
        return False


class UserSettings(models.Model):
    """Per-user privacy preferences. A missing row means every flag is on."""
    user = models.OneToOneField(
        UserAccount,
        on_delete=models.CASCADE,
        primary_key=True,
        related_name='settings',
        db_column='user_id'
    )
    show_on_leaderboard = models.BooleanField(default=True)
    show_stats = models.BooleanField(default=True)
    show_heatmap = models.BooleanField(default=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'user_settings'
        verbose_name = 'User Settings'
        verbose_name_plural = 'User Settings'

    def __str__(self):
        return f"Settings for {self.user_id}"


class Question(models.Model):
    """
    Catalog question. Options are an ordered list; correct_options holds
    0-based indices into it (one or more, multi-select allowed).
    """
    DIFFICULTY_CHOICES = [
        ('easy', 'Easy'),
        ('medium', 'Medium'),
        ('hard', 'Hard'),
    ]

    id = models.AutoField(primary_key=True)
    organization_id = models.CharField(max_length=64, db_index=True)
    text = models.TextField(null=False)
    options = models.JSONField(default=list)
    correct_options = models.JSONField(default=list)
    subject = models.CharField(max_length=100, db_index=True)
    topic = models.CharField(max_length=200, null=True, blank=True)
    difficulty = models.CharField(max_length=10, choices=DIFFICULTY_CHOICES, default='medium')
    explanation = models.TextField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'questions'
        verbose_name = 'Question'
        verbose_name_plural = 'Questions'

    def __str__(self):
        return f"Q{self.id}: {self.text[:50]}..."

    @property
    def option_count(self):
        return len(self.options or [])


class Test(models.Model):
    """
    Catalog test definition: an ordered list of question ids plus marking rules.
    Marks are spread uniformly, so each question is worth total_marks / len(question_ids).
    """
    STATUS_DRAFT = 'draft'
    STATUS_PUBLISHED = 'published'
    STATUS_ARCHIVED = 'archived'
    STATUS_CHOICES = [
        (STATUS_DRAFT, 'Draft'),
        (STATUS_PUBLISHED, 'Published'),
        (STATUS_ARCHIVED, 'Archived'),
    ]

    id = models.AutoField(primary_key=True)
    organization_id = models.CharField(max_length=64, db_index=True)
    title = models.TextField(null=False)
    description = models.TextField(null=True, blank=True)
    question_ids = models.JSONField(default=list)
    duration_minutes = models.PositiveIntegerField()
    total_marks = models.FloatField()
    negative_marking = models.FloatField(default=0)
    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default=STATUS_DRAFT)
    answer_key_published = models.BooleanField(default=False)
    # Empty list means the test is open to the whole organization
    batch_ids = models.JSONField(default=list, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'tests'
        verbose_name = 'Test'
        verbose_name_plural = 'Tests'
        indexes = [
            models.Index(fields=['organization_id', 'status'], name='tests_organiz_0c6a1e_idx'),
        ]

    def __str__(self):
        return f"{self.title} ({self.status})"

    @property
    def question_count(self):
        return len(self.question_ids or [])

    @property
    def duration_ms(self):
        return self.duration_minutes * 60 * 1000

    def is_open_to_batch(self, batch_id):
        if not self.batch_ids:
            return True
        return batch_id is not None and int(batch_id) in {int(b) for b in self.batch_ids}


class Attempt(models.Model):
    """
    One student's attempt at one test.

    in_progress -> submitted is the only transition. Once submitted, the counts,
    score and timestamps never change again.
    """
    STATUS_IN_PROGRESS = 'in_progress'
    STATUS_SUBMITTED = 'submitted'
    STATUS_CHOICES = [
        (STATUS_IN_PROGRESS, 'In Progress'),
        (STATUS_SUBMITTED, 'Submitted'),
    ]

    id = models.AutoField(primary_key=True)
    user = models.ForeignKey(UserAccount, on_delete=models.CASCADE, related_name='attempts', db_column='user_id')
    test = models.ForeignKey(Test, on_delete=models.CASCADE, related_name='attempts', db_column='test_id')
    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default=STATUS_IN_PROGRESS)
    score = models.FloatField(default=0)
    total_questions = models.IntegerField(default=0)
    correct = models.IntegerField(default=0)
    incorrect = models.IntegerField(default=0)
    unanswered = models.IntegerField(default=0)
    started_at = models.DateTimeField(default=timezone.now)
    submitted_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = 'attempts'
        verbose_name = 'Attempt'
        verbose_name_plural = 'Attempts'
        indexes = [
            models.Index(fields=['user', 'test', 'started_at'], name='attempts_user_id_3f0d2a_idx'),
            models.Index(fields=['test', 'status'], name='attempts_test_id_7c1b9e_idx'),
            models.Index(fields=['status', 'submitted_at'], name='attempts_status_a84e21_idx'),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=['user', 'test'],
                condition=Q(status='in_progress'),
                name='one_in_progress_attempt_per_user_test',
            ),
        ]

    def __str__(self):
        return f"Attempt {self.id} - {self.user_id} - test {self.test_id} - {self.status}"

    @property
    def is_submitted(self):
        return self.status == self.STATUS_SUBMITTED

    @property
    def questions_seen(self):
        return self.correct + self.incorrect + self.unanswered

    @property
    def time_taken_seconds(self):
        if not self.submitted_at:
            return None
        return int((self.submitted_at - self.started_at).total_seconds())


class AttemptAnswer(models.Model):
    """Selected option indices for one question inside an attempt. Empty list = unanswered."""
    id = models.AutoField(primary_key=True)
    attempt = models.ForeignKey(Attempt, on_delete=models.CASCADE, related_name='answers', db_column='attempt_id')
    question = models.ForeignKey(Question, on_delete=models.CASCADE, db_column='question_id')
    selected_options = models.JSONField(default=list)
    answered_at = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = 'attempt_answers'
        verbose_name = 'Attempt Answer'
        verbose_name_plural = 'Attempt Answers'
        unique_together = ('attempt', 'question')

    def __str__(self):
        return f"Attempt {self.attempt_id} - Q{self.question_id}: {self.selected_options or 'Unanswered'}"
