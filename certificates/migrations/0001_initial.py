import certificates.models
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('contests', '0001_initial'),
        ('hackathons', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Certificate',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('kind', models.CharField(choices=[('HACKATHON', 'Hackathon'), ('CONTEST', 'Coding contest')], max_length=10)),
                ('title', models.CharField(max_length=100)),
                ('rank', models.PositiveIntegerField(blank=True, null=True)),
                ('total_participants', models.PositiveIntegerField(default=0)),
                ('score', models.FloatField(blank=True, null=True)),
                ('max_score', models.FloatField(blank=True, null=True)),
                ('certificate_id', models.CharField(default=certificates.models.generate_certificate_id, editable=False, max_length=8, unique=True)),
                ('issued_at', models.DateTimeField(auto_now_add=True)),
                ('contest', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, related_name='certificates', to='contests.codingcontest')),
                ('hackathon', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, related_name='certificates', to='hackathons.hackathon')),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='certificates', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'ordering': ('-issued_at',),
                'constraints': [
                    models.UniqueConstraint(condition=models.Q(('hackathon__isnull', False)), fields=('user', 'hackathon'), name='unique_hackathon_certificate'),
                    models.UniqueConstraint(condition=models.Q(('contest__isnull', False)), fields=('user', 'contest'), name='unique_contest_certificate'),
                ],
            },
        ),
    ]
