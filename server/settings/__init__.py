"""
This is a django-split-settings main file.

For more information read this:
https://github.com/sobolevn/django-split-settings

Settings components live in ``server/settings/components``.
"""

from split_settings.tools import include

include(
    'components/common.py',
    'components/logging.py',
    'components/storages.py',
)
