"""
ASGI entry point.

``uvicorn rd_prediction.main:app`` serves the application built from the
environment settings.
"""

from rd_prediction.app_factory import create_application

app = create_application()
