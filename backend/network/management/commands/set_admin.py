"""
Management command to grant the admin flag to an account.
Usage: python manage.py set_admin jane@example.com
"""
from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand, CommandError

User = get_user_model()


class Command(BaseCommand):
    help = 'Grant admin rights (staff and superuser) to an account'

    def add_arguments(self, parser):
        parser.add_argument('email', type=str, help='Email of the account to make admin')
        parser.add_argument(
            '--revoke',
            action='store_true',
            help='Remove admin rights instead of granting them',
        )

    def handle(self, *args, **options):
        email = options['email'].strip().lower()
        grant = not options['revoke']

        try:
            user = User.objects.get(email__iexact=email)
        except User.DoesNotExist:
            raise CommandError(f'Account with email {email} does not exist')

        user.is_staff = grant
        user.is_superuser = grant
        user.save(update_fields=['is_staff', 'is_superuser'])

        self.stdout.write(
            self.style.SUCCESS(
                f"{'Granted' if grant else 'Revoked'} admin for {email}:\n"
                f'  is_staff: {user.is_staff}\n'
                f'  is_superuser: {user.is_superuser}'
            )
        )
