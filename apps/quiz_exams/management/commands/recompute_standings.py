from django.core.management.base import BaseCommand, CommandError
from apps.quiz_exams.exceptions import NotFound
from apps.quiz_exams.models import Exam
from apps.quiz_exams.services import exam_critical_section, recompute_standings


class Command(BaseCommand):
    help = 'Rebuilds ranks and analytics for stale exams, or for the given exam ids'

    def add_arguments(self, parser):
        parser.add_argument('exam_ids', nargs='*', help='Exam ids to rebuild (default: all stale exams)')
        parser.add_argument('--all', action='store_true', help='Rebuild every exam')

    def handle(self, *args, **options):
        if options['exam_ids']:
            exam_ids = options['exam_ids']
        elif options['all']:
            exam_ids = list(Exam.objects.values_list('pk', flat=True))
        else:
            exam_ids = list(Exam.objects.filter(standings_stale=True).values_list('pk', flat=True))

        if not exam_ids:
            self.stdout.write('Nothing to rebuild.')
            return

        failed = 0
        for exam_id in exam_ids:
            try:
                with exam_critical_section(exam_id) as exam:
                    if recompute_standings(exam):
                        self.stdout.write(self.style.SUCCESS(f'Rebuilt standings for {exam}'))
                    else:
                        failed += 1
                        self.stdout.write(self.style.ERROR(f'Standings for {exam} are still stale'))
            except NotFound:
                raise CommandError(f'Exam "{exam_id}" does not exist')

        if failed:
            raise CommandError(f'{failed} exam(s) could not be rebuilt')
