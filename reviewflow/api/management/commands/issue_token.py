from datetime import timedelta

from django.core.management.base import BaseCommand, CommandError

from reviewflow.api.auth import TokenType, generate_token


class Command(BaseCommand):
    help = 'Выпускает API-токен заданного типа (user или admin)'

    def add_arguments(self, parser):
        parser.add_argument('token_type', choices=TokenType.values)
        parser.add_argument('--hours', type=int, default=24, help='срок действия в часах')

    def handle(self, *args, **options):
        if options['hours'] <= 0:
            raise CommandError('--hours must be positive')

        token = generate_token(options['token_type'], timedelta(hours=options['hours']))
        self.stdout.write(token)
