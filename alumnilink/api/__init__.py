# alumnilink/api/__init__.py
# This file makes the api directory a Python package.

from . import mentorship
from . import notification

__all__ = [
    "mentorship",
    "notification",
]
