"""Top-level package for Django configuration.

Holds the settings modules for each environment, the URL root and the
entry points for WSGI and ASGI.
"""
