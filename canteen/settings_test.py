"""
Settings for the test suite: the regular settings with a throwaway secret key
and a fast password hasher.
"""

import os

os.environ.setdefault("DJANGO_SECRET_KEY", "canteen-test-secret-key")

from .settings import *  # noqa: E402,F401,F403

PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]
