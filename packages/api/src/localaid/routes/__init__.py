# This project was developed with assistance from AI tools.
"""HTTP route modules, one APIRouter each."""
