from django.apps import AppConfig


class QuizExamsConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.quiz_exams'
    label = 'quiz_exams'
    verbose_name = 'Quiz Exams'

    def ready(self):
        from . import signals  # noqa: F401
