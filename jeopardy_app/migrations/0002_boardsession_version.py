from django.db import migrations, models


class Migration(migrations.Migration):

    dependencies = [
        ('jeopardy_app', '0001_initial'),
    ]

    operations = [
        migrations.AddField(
            model_name='boardsession',
            name='version',
            field=models.PositiveIntegerField(default=0, help_text='Incremented on every write'),
        ),
    ]
