import uuid

import django.contrib.auth.models
import django.contrib.auth.validators
import django.core.validators
import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('auth', '0012_alter_user_first_name_max_length'),
    ]

    operations = [
        migrations.CreateModel(
            name='User',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('password', models.CharField(max_length=128, verbose_name='password')),
                ('last_login', models.DateTimeField(blank=True, null=True, verbose_name='last login')),
                ('is_superuser', models.BooleanField(default=False, help_text='Designates that this user has all permissions without explicitly assigning them.', verbose_name='superuser status')),
                ('username', models.CharField(error_messages={'unique': 'A user with that username already exists.'}, help_text='Required. 150 characters or fewer. Letters, digits and @/./+/-/_ only.', max_length=150, unique=True, validators=[django.contrib.auth.validators.UnicodeUsernameValidator()], verbose_name='username')),
                ('first_name', models.CharField(blank=True, max_length=150, verbose_name='first name')),
                ('last_name', models.CharField(blank=True, max_length=150, verbose_name='last name')),
                ('email', models.EmailField(blank=True, max_length=254, verbose_name='email address')),
                ('is_staff', models.BooleanField(default=False, help_text='Designates whether the user can log into this admin site.', verbose_name='staff status')),
                ('is_active', models.BooleanField(default=True, help_text='Designates whether this user should be treated as active. Unselect this instead of deleting accounts.', verbose_name='active')),
                ('date_joined', models.DateTimeField(default=django.utils.timezone.now, verbose_name='date joined')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('groups', models.ManyToManyField(blank=True, help_text='The groups this user belongs to. A user will get all permissions granted to each of their groups.', related_name='user_set', related_query_name='user', to='auth.group', verbose_name='groups')),
                ('user_permissions', models.ManyToManyField(blank=True, help_text='Specific permissions for this user.', related_name='user_set', related_query_name='user', to='auth.permission', verbose_name='user permissions')),
            ],
            options={
                'db_table': 'users',
                'indexes': [models.Index(fields=['email'], name='users_email_idx')],
            },
            managers=[
                ('objects', django.contrib.auth.models.UserManager()),
            ],
        ),
        migrations.CreateModel(
            name='Exam',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('title', models.CharField(max_length=255)),
                ('course', models.CharField(max_length=100)),
                ('month_number', models.PositiveIntegerField(default=1, validators=[django.core.validators.MinValueValidator(1), django.core.validators.MaxValueValidator(12)])),
                ('duration_minutes', models.IntegerField(default=30, validators=[django.core.validators.MinValueValidator(1), django.core.validators.MaxValueValidator(300)])),
                ('instructions', models.TextField(blank=True)),
                ('total_marks', models.PositiveIntegerField(default=0, editable=False)),
                ('is_active', models.BooleanField(default=True)),
                ('standings_stale', models.BooleanField(default=False, editable=False)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'db_table': 'quiz_exams',
                'ordering': ['course', 'month_number', '-created_at'],
                'indexes': [
                    models.Index(fields=['course', 'month_number'], name='quiz_exams_course_month_idx'),
                    models.Index(fields=['is_active'], name='quiz_exams_is_active_idx'),
                ],
                'constraints': [
                    models.CheckConstraint(condition=models.Q(('duration_minutes__gt', 0)), name='chk_quiz_exams_duration_minutes'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Question',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('question_text', models.TextField()),
                ('options', models.JSONField(default=list)),
                ('correct_answer', models.TextField()),
                ('marks', models.IntegerField(default=1, validators=[django.core.validators.MinValueValidator(1)])),
                ('difficulty', models.CharField(choices=[('EASY', 'Easy'), ('MEDIUM', 'Medium'), ('HARD', 'Hard')], default='MEDIUM', max_length=10)),
                ('order', models.IntegerField(default=0)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('exam', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='questions', to='quiz_exams.exam')),
            ],
            options={
                'db_table': 'quiz_exam_questions',
                'ordering': ['exam', 'order', 'created_at'],
                'indexes': [
                    models.Index(fields=['exam', 'order'], name='quiz_questions_exam_order_idx'),
                    models.Index(fields=['difficulty'], name='quiz_questions_difficulty_idx'),
                ],
                'constraints': [
                    models.CheckConstraint(condition=models.Q(('marks__gt', 0)), name='chk_quiz_questions_marks'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Attempt',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('score', models.IntegerField(default=0)),
                ('total_marks', models.IntegerField(default=0)),
                ('percentage', models.FloatField(default=0.0)),
                ('started_at', models.DateTimeField(default=django.utils.timezone.now)),
                ('submitted_at', models.DateTimeField(blank=True, null=True)),
                ('rank', models.PositiveIntegerField(blank=True, null=True)),
                ('details', models.JSONField(blank=True, default=dict)),
                ('exam', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='attempts', to='quiz_exams.exam')),
                ('learner', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='quiz_attempts', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'quiz_exam_attempts',
                'ordering': ['-started_at'],
                'indexes': [
                    models.Index(fields=['exam', '-percentage', 'submitted_at'], name='quiz_attempts_standing_idx'),
                    models.Index(fields=['learner', '-started_at'], name='quiz_attempts_learner_idx'),
                    models.Index(fields=['exam', 'learner'], name='quiz_attempts_exam_learner_idx'),
                ],
                'constraints': [
                    models.UniqueConstraint(condition=models.Q(('submitted_at__isnull', True)), fields=('exam', 'learner'), name='unique_active_attempt_per_learner'),
                    models.CheckConstraint(condition=models.Q(('score__gte', 0)), name='chk_quiz_attempts_score'),
                    models.CheckConstraint(condition=models.Q(('percentage__gte', 0.0), ('percentage__lte', 100.0)), name='chk_quiz_attempts_percentage'),
                    models.CheckConstraint(condition=models.Q(('submitted_at__isnull', True), ('submitted_at__gte', models.F('started_at')), _connector='OR'), name='chk_quiz_attempts_submitted_after_started'),
                    models.CheckConstraint(condition=models.Q(('rank__isnull', True), ('rank__gt', 0), _connector='OR'), name='chk_quiz_attempts_rank'),
                ],
            },
        ),
        migrations.CreateModel(
            name='AnalyticsSummary',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('average_percentage', models.FloatField(default=0.0)),
                ('highest_percentage', models.FloatField(default=0.0)),
                ('lowest_percentage', models.FloatField(default=0.0)),
                ('total_attempts', models.PositiveIntegerField(default=0)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('exam', models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name='analytics', to='quiz_exams.exam')),
                ('topper', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='topped_exams', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'quiz_exam_analytics',
                'constraints': [
                    models.CheckConstraint(condition=models.Q(('lowest_percentage__lte', models.F('average_percentage')), ('average_percentage__lte', models.F('highest_percentage'))), name='chk_quiz_analytics_score_consistency'),
                ],
            },
        ),
    ]
