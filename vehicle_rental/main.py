import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from vehicle_rental.circuit_breaker import circuit_breaker_manager
from vehicle_rental.config import PORT
from vehicle_rental.database import Base, engine
from vehicle_rental.errors import register_exception_handlers
from vehicle_rental.routes import api_router

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables ready")
    yield
    logger.info("Shutting down")


app = FastAPI(title="Vehicle Rental Service", lifespan=lifespan)
register_exception_handlers(app)
app.include_router(api_router)


@app.get("/manage/health")
def health_check():
    return {"status": "ok", "breakers": circuit_breaker_manager.get_all_states()}


if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=PORT)
