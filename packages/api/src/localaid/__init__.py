# This project was developed with assistance from AI tools.
"""LocalAid API."""

__version__ = "0.1.0"
