import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('hackathons', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='HackathonRole',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('role', models.CharField(choices=[('MENTOR', 'Mentor'), ('JUDGE', 'Judge'), ('ORGANIZER', 'Organizer'), ('VOLUNTEER', 'Volunteer'), ('SPONSOR_REP', 'Sponsor representative')], max_length=12)),
                ('status', models.CharField(choices=[('PENDING', 'Pending'), ('ACCEPTED', 'Accepted'), ('DECLINED', 'Declined'), ('REVOKED', 'Revoked')], default='PENDING', max_length=10)),
                ('invited_at', models.DateTimeField(auto_now_add=True)),
                ('responded_at', models.DateTimeField(blank=True, null=True)),
                ('expertise', models.JSONField(blank=True, default=list)),
                ('bio', models.TextField(blank=True, max_length=1000)),
                ('can_judge_all_tracks', models.BooleanField(default=True)),
                ('assigned_tracks', models.ManyToManyField(blank=True, related_name='role_assignments', to='hackathons.track')),
                ('hackathon', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='roles', to='hackathons.hackathon')),
                ('invited_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='sent_role_invitations', to=settings.AUTH_USER_MODEL)),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='hackathon_roles', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'ordering': ('role', 'invited_at'),
                'constraints': [models.UniqueConstraint(fields=('hackathon', 'user', 'role'), name='unique_hackathon_role')],
            },
        ),
    ]
