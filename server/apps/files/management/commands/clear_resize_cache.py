"""Management command to clear cached resized images."""

from typing import Any

from django.core.management.base import BaseCommand, CommandError

from server.apps.files.logic.image_operations import clear_resize_cache
from server.apps.files.models import File


class Command(BaseCommand):
    """Delete resized images so they get recomputed on next request."""

    help = 'Clear cached resized images (all, or of the given files)'

    def add_arguments(self, parser: Any) -> None:
        """Add command line arguments.

        Args:
            parser: Argument parser.
        """
        parser.add_argument(
            '--file-id',
            action='append',
            type=int,
            dest='file_ids',
            default=[],
            help='Only clear derivatives of this file (repeatable)',
        )
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Show what would be deleted without deleting',
        )

    def handle(self, *args: Any, **options: Any) -> None:
        """Execute the clear command.

        Args:
            args: Positional arguments (unused).
            options: Command options.
        """
        dry_run = options['dry_run']
        file_ids = options['file_ids']

        if file_ids:
            images = list(File.objects.filter(id__in=file_ids))
            missing = set(file_ids) - {image.id for image in images}
            if missing:
                raise CommandError(
                    'Files not found: {0}'.format(
                        ', '.join(str(file_id) for file_id in sorted(missing)),
                    ),
                )
            removed = []
            for image in images:
                removed.extend(clear_resize_cache(image, dry_run=dry_run))
        else:
            removed = clear_resize_cache(dry_run=dry_run)

        if dry_run:
            for path in removed:
                self.stdout.write(f'Would delete: {path}')
            self.stdout.write(
                self.style.SUCCESS(
                    f'Would clear {len(removed)} resized images',
                ),
            )
        else:
            self.stdout.write(
                self.style.SUCCESS(f'Cleared {len(removed)} resized images'),
            )
