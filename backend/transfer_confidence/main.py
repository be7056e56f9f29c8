from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import Config
from .logging_config import configure_logging
from .routers import transfers

logger = configure_logging(Config.LOG_LEVEL)

app = FastAPI(title="MBTA Transfer Confidence API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=Config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(transfers.router)


@app.get("/health")
async def health_check():
    return {"status": "healthy", "service": "transfer-confidence"}


if __name__ == "__main__":
    import uvicorn
    logger.info("Starting transfer confidence API on %s:%s", Config.HOST, Config.PORT)
    uvicorn.run(app, host=Config.HOST, port=Config.PORT)
