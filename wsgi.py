"""WSGI entrypoint for the read-only API.

Usage:
  gunicorn -w 2 -b 0.0.0.0:8000 wsgi:app
"""

from diaria import create_app

app = create_app()
