"""
Web Application Entry Point
============================

FastAPI application exposing save outcomes to a presentation layer.

Author: pocket_sync Project
License: MIT
"""

from fastapi import FastAPI
from typing import Optional

from .routes import api_router, set_orchestrator
from ..utils.logger import get_logger, setup_logging
from ..core.orchestrator import Orchestrator
from ..config.config_loader import ConfigLoader

logger = get_logger(__name__)

orchestrator: Optional[Orchestrator] = None

app = FastAPI(
    title="pocket_sync",
    description="Analogue Pocket / MiSTer save reconciliation",
    version="0.1.0",
    docs_url="/api/docs",
    redoc_url="/api/redoc"
)

app.include_router(api_router, prefix="/api", tags=["API"])


@app.on_event("startup")
async def startup_event():
    """Load configuration and build the orchestrator."""
    global orchestrator
    
    try:
        config = ConfigLoader().load()
        setup_logging(
            log_level=config.app.log_level,
            log_to_file=config.app.log_to_file,
            log_file_path=config.app.log_file_path,
            json_format=config.app.log_json
        )
        
        orchestrator = Orchestrator(config)
        set_orchestrator(orchestrator)
        
        logger.info("pocket_sync web application started")
        
    except Exception as e:
        logger.error(f"Error during startup: {e}", exc_info=True)
        raise


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": "pocket_sync"}


def main():
    """Run the API with uvicorn using the configured host and port."""
    import uvicorn
    
    config = ConfigLoader().load()
    uvicorn.run(
        "pocket_sync.web.app:app",
        host=config.app.host,
        port=config.app.port,
        log_level=str(config.app.log_level).lower()
    )


if __name__ == "__main__":
    main()
