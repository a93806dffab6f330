"""Django settings shared by every environment."""

from typing import Final

from decouple import Csv

from server.settings.components import BASE_DIR, config

SECRET_KEY = config('DJANGO_SECRET_KEY', default='insecure-development-key')

DEBUG = config('DJANGO_DEBUG', cast=bool, default=False)

ALLOWED_HOSTS: Final = config(
    'DJANGO_ALLOWED_HOSTS',
    cast=Csv(),
    default='localhost',
)

INSTALLED_APPS: Final = (
    'django.contrib.contenttypes',

    # Our apps:
    'server.apps.files',
)

DATABASES: Final = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': BASE_DIR.joinpath(
            config('DJANGO_DATABASE_NAME', default='db.sqlite3'),
        ),
    },
}

DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'

LANGUAGE_CODE = 'en-us'

TIME_ZONE = 'UTC'

USE_I18N = False

USE_TZ = True
