"""
WSGI config for coaching_backend project.
"""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'coaching_backend.settings')

application = get_wsgi_application()
