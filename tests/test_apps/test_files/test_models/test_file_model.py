"""Tests for File model."""

from datetime import timedelta

import pytest
from django.utils import timezone

from server.apps.files.models import File


@pytest.mark.django_db
def test_file_model_str():
    """Test File __str__ method."""
    file_instance = File.objects.create(
        name='photo.jpg',
        path='/uploads/1ab/photo.jpg',
    )

    assert str(file_instance) == '/uploads/1ab/photo.jpg'


@pytest.mark.django_db
def test_file_ordering_newest_first():
    """Test default ordering lists recent uploads first."""
    older = File.objects.create(name='a.jpg', path='/uploads/1ab/a.jpg')
    newer = File.objects.create(name='b.jpg', path='/uploads/2cd/b.jpg')
    File.objects.filter(id=older.id).update(
        uploaded_at=timezone.now() - timedelta(minutes=5),
    )

    assert list(File.objects.all()) == [newer, older]
