"""Settings package for the stay pricing service.

``base.py`` holds the configuration shared by every environment. The
``dev.py``, ``prod.py`` and ``test.py`` modules extend it with
environment specific overrides.
"""
