# This project was developed with assistance from AI tools.
"""Background jobs executed by the Celery worker."""
