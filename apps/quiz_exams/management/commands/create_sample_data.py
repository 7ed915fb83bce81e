from django.core.management.base import BaseCommand
from django.contrib.auth import get_user_model
from rest_framework.authtoken.models import Token
from apps.quiz_exams.models import Exam, Question

User = get_user_model()

SAMPLE_LEARNERS = [
    ('student1', 'Alice', 'Johnson'),
    ('student2', 'Bob', 'Smith'),
    ('student3', 'Chioma', 'Okafor'),
]


class Command(BaseCommand):
    help = 'Creates sample quiz exams and learners for trying out the API'

    def handle(self, *args, **kwargs):
        self.stdout.write('Creating sample data...')

        for username, first_name, last_name in SAMPLE_LEARNERS:
            if User.objects.filter(username=username).exists():
                continue
            user = User.objects.create_user(
                username=username,
                email=f'{username}@test.com',
                password='testpass123',
                first_name=first_name,
                last_name=last_name
            )
            token, _ = Token.objects.get_or_create(user=user)
            self.stdout.write(self.style.SUCCESS(f'Created learner: {username} (token {token.key})'))

        if not User.objects.filter(username='instructor1').exists():
            staff = User.objects.create_user(
                username='instructor1',
                email='instructor1@test.com',
                password='testpass123',
                is_staff=True
            )
            token, _ = Token.objects.get_or_create(user=staff)
            self.stdout.write(self.style.SUCCESS(f'Created staff: instructor1 (token {token.key})'))

        # Biology quiz
        bio_exam = Exam.objects.create(
            title='Cell Biology Quiz',
            course='BIO 101',
            month_number=1,
            duration_minutes=20,
            instructions='Pick one option per question.'
        )

        Question.objects.create(
            exam=bio_exam,
            question_text='What is the powerhouse of the cell?',
            options=['Nucleus', 'Mitochondria', 'Ribosome', 'Golgi apparatus'],
            correct_answer='Mitochondria',
            marks=5,
            difficulty=Question.EASY,
            order=1
        )

        Question.objects.create(
            exam=bio_exam,
            question_text='Photosynthesis occurs in which organelle?',
            options=['Chloroplast', 'Vacuole', 'Lysosome', 'Centrosome'],
            correct_answer='Chloroplast',
            marks=5,
            difficulty=Question.EASY,
            order=2
        )

        Question.objects.create(
            exam=bio_exam,
            question_text='DNA replication is described as:',
            options=['Conservative', 'Semi-conservative', 'Dispersive'],
            correct_answer='Semi-conservative',
            marks=10,
            difficulty=Question.MEDIUM,
            order=3
        )

        bio_exam.refresh_from_db()
        self.stdout.write(self.style.SUCCESS(
            f'Created Biology quiz with 3 questions ({bio_exam.total_marks} marks)'
        ))

        # Computer Science quiz
        cs_exam = Exam.objects.create(
            title='Algorithms Checkpoint',
            course='CS 201',
            month_number=2,
            duration_minutes=15,
            instructions='Answers are case-sensitive.'
        )

        Question.objects.create(
            exam=cs_exam,
            question_text='What is the time complexity of binary search?',
            options=['O(n)', 'O(log n)', 'O(n log n)', 'O(1)'],
            correct_answer='O(log n)',
            marks=5,
            difficulty=Question.EASY,
            order=1
        )

        Question.objects.create(
            exam=cs_exam,
            question_text='Which data structure uses LIFO (Last In First Out)?',
            options=['Queue', 'Heap', 'Stack', 'Graph'],
            correct_answer='Stack',
            marks=5,
            difficulty=Question.EASY,
            order=2
        )

        Question.objects.create(
            exam=cs_exam,
            question_text='Is quicksort a stable sorting algorithm?',
            options=['True', 'False'],
            correct_answer='False',
            marks=10,
            difficulty=Question.HARD,
            order=3
        )

        cs_exam.refresh_from_db()
        self.stdout.write(self.style.SUCCESS(
            f'Created CS quiz with 3 questions ({cs_exam.total_marks} marks)'
        ))

        self.stdout.write(self.style.SUCCESS('Sample data created successfully!'))
        self.stdout.write('Test credentials: username=student1, password=testpass123')
