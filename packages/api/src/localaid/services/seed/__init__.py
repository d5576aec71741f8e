# This project was developed with assistance from AI tools.
"""Service catalog seed data and loader."""
