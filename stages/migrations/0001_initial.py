from decimal import Decimal

import django.core.validators
import django.db.models.deletion
import stages.models
from django.conf import settings
from django.db import migrations, models

HEX_COLOR = django.core.validators.RegexValidator('^#[0-9A-Fa-f]{6}$', 'Invalid color format')
STAGE_TYPES = [
    ('REGISTRATION', 'Registration'),
    ('TEAM_FORMATION', 'Team formation'),
    ('IDEATION', 'Ideation'),
    ('MENTORING_SESSION', 'Mentoring session'),
    ('CHECKPOINT', 'Checkpoint'),
    ('DEVELOPMENT', 'Development'),
    ('EVALUATION', 'Evaluation'),
    ('PRESENTATION', 'Presentation'),
    ('RESULTS', 'Results'),
    ('CUSTOM', 'Custom'),
]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('hackathons', '0001_initial'),
        ('organizations', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='HackathonStage',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=100, validators=[django.core.validators.MinLengthValidator(2)])),
                ('description', models.TextField(blank=True)),
                ('type', models.CharField(choices=STAGE_TYPES, default='CUSTOM', max_length=20)),
                ('order', models.PositiveIntegerField(default=1)),
                ('color', models.CharField(default='#6366F1', max_length=7, validators=[HEX_COLOR])),
                ('start_date', models.DateTimeField()),
                ('end_date', models.DateTimeField()),
                ('allow_parallel', models.BooleanField(default=False)),
                ('is_elimination', models.BooleanField(default=False)),
                ('elimination_type', models.CharField(blank=True, choices=[('TOP_N', 'Top N'), ('PERCENTAGE', 'Top percentage'), ('SCORE_THRESHOLD', 'Score threshold')], max_length=16)),
                ('elimination_value', models.DecimalField(blank=True, decimal_places=2, max_digits=8, null=True)),
                ('elimination_notes', models.TextField(blank=True)),
                ('judging_criteria', models.JSONField(blank=True, default=list)),
                ('min_judges', models.PositiveSmallIntegerField(default=1)),
                ('blind_judging', models.BooleanField(default=False)),
                ('requires_submission', models.BooleanField(default=False)),
                ('submission_instructions', models.TextField(blank=True)),
                ('submission_deadline', models.DateTimeField(blank=True, null=True)),
                ('allow_late_submission', models.BooleanField(default=False)),
                ('late_penalty', models.PositiveSmallIntegerField(default=0, help_text='Percentage deducted from late submissions', validators=[django.core.validators.MaxValueValidator(100)])),
                ('mentor_slot_duration', models.PositiveSmallIntegerField(blank=True, help_text='Minutes', null=True)),
                ('max_slots_per_team', models.PositiveSmallIntegerField(blank=True, null=True)),
                ('notify_on_start', models.BooleanField(default=True)),
                ('notify_before_deadline', models.BooleanField(default=True)),
                ('reminder_hours', models.JSONField(blank=True, default=stages.models.default_reminder_hours)),
                ('notify_on_complete', models.BooleanField(default=True)),
                ('notify_on_elimination', models.BooleanField(default=True)),
                ('is_active', models.BooleanField(default=False)),
                ('is_completed', models.BooleanField(default=False)),
                ('completed_at', models.DateTimeField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('depends_on', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='dependents', to='stages.hackathonstage')),
                ('hackathon', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='stages', to='hackathons.hackathon')),
            ],
            options={
                'ordering': ('hackathon', 'order'),
            },
        ),
        migrations.CreateModel(
            name='StageTemplate',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=100, validators=[django.core.validators.MinLengthValidator(2)])),
                ('description', models.TextField(blank=True)),
                ('type', models.CharField(choices=STAGE_TYPES, default='CUSTOM', max_length=20)),
                ('color', models.CharField(default='#6366F1', max_length=7, validators=[HEX_COLOR])),
                ('default_duration_hours', models.PositiveIntegerField(default=24, validators=[django.core.validators.MinValueValidator(1)])),
                ('settings', models.JSONField(blank=True, default=dict)),
                ('is_public', models.BooleanField(default=False)),
                ('usage_count', models.PositiveIntegerField(default=0)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('organization', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, related_name='stage_templates', to='organizations.organization')),
            ],
            options={
                'ordering': ('-usage_count', 'name'),
            },
        ),
        migrations.CreateModel(
            name='StageSubmission',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('title', models.CharField(max_length=200, validators=[django.core.validators.MinLengthValidator(2)])),
                ('description', models.TextField(blank=True)),
                ('content', models.TextField(blank=True)),
                ('links', models.JSONField(blank=True, default=list)),
                ('attachments', models.JSONField(blank=True, default=list)),
                ('status', models.CharField(choices=[('PENDING', 'Pending'), ('SUBMITTED', 'Submitted'), ('UNDER_REVIEW', 'Under review'), ('APPROVED', 'Approved'), ('REJECTED', 'Rejected'), ('NEEDS_REVISION', 'Needs revision')], default='SUBMITTED', max_length=16)),
                ('is_late', models.BooleanField(default=False)),
                ('score', models.DecimalField(blank=True, decimal_places=2, max_digits=6, null=True, validators=[django.core.validators.MinValueValidator(Decimal('0')), django.core.validators.MaxValueValidator(Decimal('100'))])),
                ('feedback', models.TextField(blank=True)),
                ('judged_at', models.DateTimeField(blank=True, null=True)),
                ('submitted_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('judged_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='judged_stage_submissions', to=settings.AUTH_USER_MODEL)),
                ('stage', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='submissions', to='stages.hackathonstage')),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='stage_submissions', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'ordering': ('-submitted_at',),
                'constraints': [models.UniqueConstraint(fields=('stage', 'user'), name='unique_stage_submission')],
            },
        ),
    ]
