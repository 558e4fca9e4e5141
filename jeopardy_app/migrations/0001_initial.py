from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='BoardSession',
            fields=[
                ('session_key', models.CharField(help_text='Django session key as primary identifier', max_length=40, primary_key=True, serialize=False)),
                ('board', models.JSONField(blank=True, help_text='Serialized board, including hidden clue text', null=True)),
                ('build_token', models.CharField(blank=True, help_text='Token of the build in flight, if any', max_length=32, null=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'indexes': [models.Index(fields=['updated_at'], name='jeopardy_board_updated_idx')],
            },
        ),
    ]
