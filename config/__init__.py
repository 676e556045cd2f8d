"""Top-level package for Django configuration.

Contains the settings modules for each environment and the WSGI and
ASGI entry points of the stay pricing service.
"""
