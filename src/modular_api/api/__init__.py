"""
modular_api.api

HTTP layer (FastAPI).

Responsibilities:
- Compose the application and expose module routers.
"""

# Package marker.
