"""Tests for clear_resize_cache management command."""

from io import StringIO

import pytest
from django.core.management import CommandError, call_command

from server.apps.files.logic.image_operations import resize_to_set


@pytest.mark.django_db
class TestClearResizeCacheCommand:
    """Tests for clear_resize_cache management command."""

    def test_clears_all_derivatives(self, store_root, stored_image):
        """Test every cached derivative is deleted."""
        variants = resize_to_set(stored_image, 10, 10)

        out = StringIO()
        call_command('clear_resize_cache', stdout=out)

        assert not (store_root / variants['1x'].lstrip('/')).exists()
        assert not (store_root / variants['2x'].lstrip('/')).exists()
        assert (store_root / stored_image.path.lstrip('/')).is_file()
        assert 'Cleared 2 resized images' in out.getvalue()

    def test_clears_selected_file(self, store_root, stored_image):
        """Test --file-id limits clearing to one file."""
        variants = resize_to_set(stored_image, 10, 10)

        out = StringIO()
        call_command(
            'clear_resize_cache',
            '--file-id',
            str(stored_image.id),
            stdout=out,
        )

        assert not (store_root / variants['1x'].lstrip('/')).exists()
        assert 'Cleared 2 resized images' in out.getvalue()

    def test_dry_run(self, store_root, stored_image):
        """Test dry run lists derivatives without deleting."""
        variants = resize_to_set(stored_image, 10, 10)

        out = StringIO()
        call_command('clear_resize_cache', '--dry-run', stdout=out)

        output = out.getvalue()
        assert f'Would delete: {variants["1x"]}' in output
        assert 'Would clear 2 resized images' in output
        assert (store_root / variants['1x'].lstrip('/')).is_file()

    def test_unknown_file_id(self, store_root):
        """Test unknown ids abort the command."""
        with pytest.raises(CommandError, match='Files not found: 99999'):
            call_command('clear_resize_cache', '--file-id', '99999')
