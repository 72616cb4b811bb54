import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
import uvicorn

from config import DEBUG, APP_HOST, APP_PORT, LOG_LEVEL
from database.init import Base, engine
import database.models  # noqa: F401  registers tables on Base.metadata
from enums.error_code import ErrorCode
from responses.error import bad_request_error
from routes import (
    occupancy_routes,
    report_routes,
    stats_routes,
)

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    Base.metadata.create_all(bind=engine)
    logger.info("Application startup complete.")
    yield
    logger.info("Application shutdown complete.")


app = FastAPI(title="Rent Ledger API", debug=DEBUG, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(occupancy_routes.router)
app.include_router(report_routes.router)
app.include_router(stats_routes.router)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Malformed request bodies and parameters get the regular failure envelope."""
    errors = exc.errors()
    logger.debug("Rejected request to %s: %s", request.url.path, errors)
    first = errors[0] if errors else {}
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "Invalid request")
    if location:
        message = f"{location}: {message}"
    return bad_request_error(message, code=ErrorCode.VALIDATION_ERROR.value)


@app.get("/")
def read_root():
    return {"name": "Rent Ledger API", "version": "1.0.0"}


if __name__ == "__main__":
    uvicorn.run("main:app", host=APP_HOST, port=APP_PORT, reload=DEBUG)
