# Generated migration for SCORM app
from django.db import migrations, models
import django.utils.timezone


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='CmiHistoryEntry',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('history_key', models.CharField(db_index=True, help_text="Identity of the learner's package/session the snapshot belongs to", max_length=255)),
                ('timestamp', models.DateTimeField(default=django.utils.timezone.now, help_text='When the snapshot was persisted')),
                ('cmi', models.JSONField(blank=True, default=dict, help_text='Exported cmi data model snapshot')),
            ],
            options={
                'verbose_name': 'CMI History Entry',
                'verbose_name_plural': 'CMI History Entries',
                'ordering': ['timestamp', 'id'],
                'indexes': [models.Index(fields=['history_key', 'timestamp'], name='scorm_history_key_time_idx')],
            },
        ),
    ]
