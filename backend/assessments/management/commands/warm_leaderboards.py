from django.core.management.base import BaseCommand, CommandError

from assessments.models import UserAccount
from assessments.services.leaderboard_service import warm_organization_leaderboards


class Command(BaseCommand):
    help = 'Recompute cached global and batch leaderboards for one or all organizations'

    def add_arguments(self, parser):
        parser.add_argument('--organization', help='Organization id to warm (default: every organization with users)')

    def handle(self, *args, **options):
        organization = options.get('organization')
        if organization:
            organizations = [organization]
        else:
            organizations = list(
                UserAccount.objects.order_by().values_list('organization_id', flat=True).distinct()
            )

        if not organizations:
            raise CommandError('No organizations found')

        total = 0
        for organization_id in organizations:
            warmed = warm_organization_leaderboards(organization_id)
            total += warmed
            self.stdout.write(f'{organization_id}: {warmed} leaderboards warmed')

        self.stdout.write(self.style.SUCCESS(f'Done. {total} leaderboards warmed.'))
