"""FastAPI application factory."""
from fastapi import FastAPI

from coach.api.routes import analytics


def create_app() -> FastAPI:
    """Build and return the FastAPI app."""
    app = FastAPI(
        title="Coach Analytics API",
        description="Streak, nutrition, recovery and weight-trend derivations",
        version="0.1.0",
    )

    app.include_router(analytics.router, prefix="/analytics", tags=["analytics"])

    return app


# Module-level app instance for uvicorn
app = create_app()
