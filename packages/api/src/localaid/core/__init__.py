# This project was developed with assistance from AI tools.
"""Settings and credential helpers."""
