import django.core.validators
import django.db.models.deletion
import django.utils.timezone
import simple_history.models
from django.conf import settings
from django.db import migrations, models

import upkeep.apps.catalog.models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Site',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('name', models.CharField(help_text='Display name for this site', max_length=200)),
                ('location', models.CharField(help_text='Address or area of the site', max_length=200)),
            ],
            options={
                'ordering': ['name'],
            },
        ),
        migrations.CreateModel(
            name='Machine',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('name', models.CharField(max_length=200)),
                ('machine_type', models.CharField(db_index=True, default='general', help_text='Free-text type; task templates apply to every machine of the same type', max_length=100)),
                ('status', models.CharField(choices=[('operational', 'Operational'), ('under-maintenance', 'Under Maintenance'), ('idle', 'Idle')], db_index=True, default='operational', max_length=20)),
                ('desired_daily_hours', models.PositiveIntegerField(help_text='Hours per day the machine is expected to run', validators=[django.core.validators.MinValueValidator(1), django.core.validators.MaxValueValidator(24)])),
                ('total_hours_run', models.PositiveIntegerField(default=0)),
                ('last_maintenance_date', models.DateTimeField(default=django.utils.timezone.now)),
                ('next_maintenance_date', models.DateTimeField(default=upkeep.apps.catalog.models.default_next_maintenance_date)),
                ('site', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='machines', to='catalog.site')),
            ],
            options={
                'ordering': ['name'],
            },
        ),
        migrations.CreateModel(
            name='HistoricalMachine',
            fields=[
                ('id', models.BigIntegerField(auto_created=True, blank=True, db_index=True, verbose_name='ID')),
                ('created_at', models.DateTimeField(blank=True, editable=False)),
                ('updated_at', models.DateTimeField(blank=True, editable=False)),
                ('name', models.CharField(max_length=200)),
                ('machine_type', models.CharField(db_index=True, default='general', help_text='Free-text type; task templates apply to every machine of the same type', max_length=100)),
                ('status', models.CharField(choices=[('operational', 'Operational'), ('under-maintenance', 'Under Maintenance'), ('idle', 'Idle')], db_index=True, default='operational', max_length=20)),
                ('desired_daily_hours', models.PositiveIntegerField(help_text='Hours per day the machine is expected to run', validators=[django.core.validators.MinValueValidator(1), django.core.validators.MaxValueValidator(24)])),
                ('total_hours_run', models.PositiveIntegerField(default=0)),
                ('last_maintenance_date', models.DateTimeField(default=django.utils.timezone.now)),
                ('next_maintenance_date', models.DateTimeField(default=upkeep.apps.catalog.models.default_next_maintenance_date)),
                ('history_id', models.AutoField(primary_key=True, serialize=False)),
                ('history_date', models.DateTimeField(db_index=True)),
                ('history_change_reason', models.CharField(max_length=100, null=True)),
                ('history_type', models.CharField(choices=[('+', 'Created'), ('~', 'Changed'), ('-', 'Deleted')], max_length=1)),
                ('history_user', models.ForeignKey(null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL)),
                ('site', models.ForeignKey(blank=True, db_constraint=False, null=True, on_delete=django.db.models.deletion.DO_NOTHING, related_name='+', to='catalog.site')),
            ],
            options={
                'verbose_name': 'historical machine',
                'verbose_name_plural': 'historical machines',
                'ordering': ('-history_date', '-history_id'),
                'get_latest_by': ('history_date', 'history_id'),
            },
            bases=(simple_history.models.HistoricalChanges, models.Model),
        ),
    ]
