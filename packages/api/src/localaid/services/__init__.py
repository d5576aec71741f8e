# This project was developed with assistance from AI tools.
"""Domain services. Functions take an AsyncSession and return plain dicts."""
