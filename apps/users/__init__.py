"""Users app package.

Defines the custom user model used as AUTH_USER_MODEL across the
project (``apps.users.models.CustomUser``). Users log in by email and
carry a platform role that the calendar services consult when deciding
who may manage a property.
"""
