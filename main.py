"""
RD Prediction API
=================
Entry point for running the service with uvicorn.

The FastAPI application is built in rd_prediction/app_factory.py and exposed
by rd_prediction/main.py; it is imported here so ``uvicorn main:app`` works
from the repository root.
"""

from rd_prediction.core.config import settings
from rd_prediction.main import app

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "rd_prediction.main:app",
        host=settings.SERVER_HOST,
        port=settings.SERVER_PORT,
        workers=settings.UVICORN_WORKERS,
    )
