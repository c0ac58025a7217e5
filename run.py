"""Entry point for running the application."""

import uvicorn
from adintel.config import settings

if __name__ == "__main__":
    uvicorn.run(
        "adintel.main:app",
        host="0.0.0.0",
        port=settings.api_port,
        reload=settings.environment == "development"
    )
