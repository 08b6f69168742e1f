import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('organizations', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='CodingContest',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('title', models.CharField(max_length=200, validators=[django.core.validators.MinLengthValidator(3)])),
                ('slug', models.CharField(max_length=100, unique=True, validators=[django.core.validators.MinLengthValidator(3), django.core.validators.RegexValidator('^[a-z0-9-]+$', 'Slug can only contain lowercase letters, numbers, and hyphens')])),
                ('description', models.TextField(blank=True)),
                ('short_description', models.CharField(blank=True, max_length=500)),
                ('banner', models.URLField(blank=True)),
                ('rules', models.TextField(blank=True)),
                ('start_time', models.DateTimeField()),
                ('end_time', models.DateTimeField()),
                ('duration', models.PositiveIntegerField(help_text='Minutes', validators=[django.core.validators.MinValueValidator(5), django.core.validators.MaxValueValidator(600)])),
                ('visibility', models.CharField(choices=[('PUBLIC', 'Public'), ('PRIVATE', 'Private'), ('INVITE_ONLY', 'Invite only'), ('ORGANIZATION_ONLY', 'Organization only')], default='PUBLIC', max_length=20)),
                ('max_participants', models.PositiveIntegerField(blank=True, null=True, validators=[django.core.validators.MinValueValidator(1)])),
                ('allow_late_join', models.BooleanField(default=False)),
                ('shuffle_questions', models.BooleanField(default=False)),
                ('show_leaderboard', models.BooleanField(default=True)),
                ('show_scores_during', models.BooleanField(default=False)),
                ('proctor_enabled', models.BooleanField(default=False)),
                ('full_screen_required', models.BooleanField(default=False)),
                ('tab_switch_limit', models.PositiveSmallIntegerField(default=3, validators=[django.core.validators.MaxValueValidator(100)])),
                ('copy_paste_disabled', models.BooleanField(default=False)),
                ('webcam_required', models.BooleanField(default=False)),
                ('negative_marking', models.BooleanField(default=False)),
                ('negative_percent', models.PositiveSmallIntegerField(default=25, validators=[django.core.validators.MaxValueValidator(100)])),
                ('partial_scoring', models.BooleanField(default=True)),
                ('status', models.CharField(choices=[('DRAFT', 'Draft'), ('PUBLISHED', 'Published'), ('REGISTRATION_OPEN', 'Registration open'), ('LIVE', 'Live'), ('ENDED', 'Ended'), ('CANCELLED', 'Cancelled')], default='DRAFT', max_length=20)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='created_contests', to=settings.AUTH_USER_MODEL)),
                ('organization', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='coding_contests', to='organizations.organization')),
            ],
            options={
                'ordering': ('-start_time',),
            },
        ),
        migrations.CreateModel(
            name='CodingQuestion',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('type', models.CharField(choices=[('MCQ', 'Multiple choice'), ('CODING', 'Coding')], max_length=8)),
                ('title', models.CharField(max_length=500, validators=[django.core.validators.MinLengthValidator(3)])),
                ('description', models.TextField(validators=[django.core.validators.MinLengthValidator(10)])),
                ('difficulty', models.CharField(choices=[('EASY', 'Easy'), ('MEDIUM', 'Medium'), ('HARD', 'Hard'), ('EXPERT', 'Expert')], default='MEDIUM', max_length=8)),
                ('points', models.PositiveIntegerField(default=100, validators=[django.core.validators.MinValueValidator(1), django.core.validators.MaxValueValidator(1000)])),
                ('order', models.PositiveIntegerField(default=0)),
                ('time_limit', models.PositiveIntegerField(blank=True, help_text='Seconds', null=True)),
                ('memory_limit', models.PositiveIntegerField(blank=True, help_text='MB', null=True, validators=[django.core.validators.MinValueValidator(16), django.core.validators.MaxValueValidator(512)])),
                ('is_active', models.BooleanField(default=True)),
                ('tags', models.JSONField(blank=True, default=list)),
                ('options', models.JSONField(blank=True, default=list)),
                ('allow_multiple', models.BooleanField(default=False)),
                ('starter_code', models.JSONField(blank=True, default=dict)),
                ('solution_code', models.TextField(blank=True)),
                ('constraints', models.TextField(blank=True)),
                ('input_format', models.TextField(blank=True)),
                ('output_format', models.TextField(blank=True)),
                ('sample_input', models.TextField(blank=True)),
                ('sample_output', models.TextField(blank=True)),
                ('explanation', models.TextField(blank=True)),
                ('hints', models.JSONField(blank=True, default=list)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('contest', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='questions', to='contests.codingcontest')),
            ],
            options={
                'ordering': ('order', 'pk'),
            },
        ),
        migrations.CreateModel(
            name='TestCase',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('input', models.TextField(blank=True)),
                ('output', models.TextField()),
                ('is_hidden', models.BooleanField(default=True)),
                ('is_sample', models.BooleanField(default=False)),
                ('points', models.PositiveIntegerField(default=0)),
                ('order', models.PositiveIntegerField(default=0)),
                ('explanation', models.TextField(blank=True)),
                ('question', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='test_cases', to='contests.codingquestion')),
            ],
            options={
                'ordering': ('order', 'pk'),
            },
        ),
        migrations.CreateModel(
            name='ContestParticipant',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('status', models.CharField(choices=[('REGISTERED', 'Registered'), ('IN_PROGRESS', 'In progress'), ('SUBMITTED', 'Submitted'), ('DISQUALIFIED', 'Disqualified')], default='REGISTERED', max_length=12)),
                ('registered_at', models.DateTimeField(auto_now_add=True)),
                ('started_at', models.DateTimeField(blank=True, null=True)),
                ('submitted_at', models.DateTimeField(blank=True, null=True)),
                ('total_score', models.FloatField(default=0)),
                ('questions_attempted', models.PositiveIntegerField(default=0)),
                ('questions_correct', models.PositiveIntegerField(default=0)),
                ('tab_switch_count', models.PositiveIntegerField(default=0)),
                ('is_disqualified', models.BooleanField(default=False)),
                ('disqualify_reason', models.TextField(blank=True)),
                ('last_active_at', models.DateTimeField(blank=True, null=True)),
                ('browser_info', models.JSONField(blank=True, default=dict)),
                ('contest', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='participants', to='contests.codingcontest')),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='contest_participations', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'ordering': ('-registered_at',),
                'constraints': [models.UniqueConstraint(fields=('contest', 'user'), name='unique_contest_participant')],
            },
        ),
        migrations.CreateModel(
            name='QuestionSubmission',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('selected_options', models.JSONField(blank=True, default=list)),
                ('code', models.TextField(blank=True)),
                ('language', models.CharField(blank=True, max_length=20)),
                ('is_correct', models.BooleanField(default=False)),
                ('score', models.FloatField(default=0)),
                ('test_cases_passed', models.PositiveIntegerField(default=0)),
                ('test_cases_total', models.PositiveIntegerField(default=0)),
                ('execution_time', models.FloatField(blank=True, help_text='Milliseconds', null=True)),
                ('attempt_number', models.PositiveIntegerField(default=1)),
                ('submitted_at', models.DateTimeField()),
                ('participant', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='submissions', to='contests.contestparticipant')),
                ('question', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='submissions', to='contests.codingquestion')),
            ],
            options={
                'ordering': ('-submitted_at', '-pk'),
            },
        ),
        migrations.CreateModel(
            name='TestCaseResult',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('test_case_index', models.PositiveIntegerField()),
                ('passed', models.BooleanField(default=False)),
                ('actual_output', models.TextField(blank=True)),
                ('expected_output', models.TextField(blank=True)),
                ('execution_time', models.FloatField(blank=True, null=True)),
                ('memory_used', models.FloatField(blank=True, null=True)),
                ('status', models.CharField(choices=[('PASSED', 'Passed'), ('FAILED', 'Failed'), ('TIME_LIMIT_EXCEEDED', 'Time limit exceeded'), ('MEMORY_LIMIT_EXCEEDED', 'Memory limit exceeded'), ('RUNTIME_ERROR', 'Runtime error'), ('COMPILATION_ERROR', 'Compilation error')], max_length=24)),
                ('error', models.TextField(blank=True)),
                ('submission', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='test_results', to='contests.questionsubmission')),
            ],
            options={
                'ordering': ('test_case_index',),
            },
        ),
        migrations.CreateModel(
            name='ProctorViolation',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('type', models.CharField(choices=[('TAB_SWITCH', 'Tab switch'), ('WINDOW_BLUR', 'Window blur'), ('COPY_ATTEMPT', 'Copy attempt'), ('PASTE_ATTEMPT', 'Paste attempt'), ('RIGHT_CLICK', 'Right click'), ('FULLSCREEN_EXIT', 'Fullscreen exit'), ('DEVTOOLS_OPEN', 'Developer tools opened'), ('SCREEN_CAPTURE_ATTEMPT', 'Screen capture attempt'), ('MULTIPLE_DISPLAYS', 'Multiple displays'), ('SUSPICIOUS_BEHAVIOR', 'Suspicious behaviour'), ('IDLE_TIMEOUT', 'Idle timeout')], max_length=24)),
                ('details', models.CharField(blank=True, max_length=1000)),
                ('timestamp', models.DateTimeField(auto_now_add=True)),
                ('participant', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='violations', to='contests.contestparticipant')),
            ],
            options={
                'ordering': ('-timestamp', '-pk'),
            },
        ),
    ]
