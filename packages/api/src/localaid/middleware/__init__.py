# This project was developed with assistance from AI tools.
"""Request middleware and FastAPI dependencies."""
