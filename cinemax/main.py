import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from cinemax.db.init_db import create_database
from cinemax.db.base import Base
from cinemax.db.session import engine
from cinemax.core.config import settings
from cinemax.core.errors import SchedulingError, ValidationError
from cinemax.api.v1.router import api_router

logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: Ensure DB exists and create tables
    create_database()
    Base.metadata.create_all(bind=engine)
    logger.info(
        "Scheduling with a %d minute buffer and a %s price ceiling.",
        settings.SHOW_BUFFER_MINUTES, settings.MAX_BASE_PRICE,
    )
    yield


from fastapi.middleware.cors import CORSMiddleware

app = FastAPI(title=settings.PROJECT_NAME, lifespan=lifespan)

# Set all CORS enabled origins
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(SchedulingError)
async def scheduling_error_handler(request: Request, exc: SchedulingError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    # Unparseable payloads get the same field-keyed body as scheduling validation
    errors = {}
    for error in exc.errors():
        loc = error.get("loc") or ("body",)
        errors.setdefault(str(loc[-1]), error.get("msg", "Invalid value"))
    body = ValidationError(errors).to_dict()
    return JSONResponse(status_code=ValidationError.status_code, content=body)


app.include_router(api_router, prefix=settings.API_V1_STR)

@app.get("/")
def read_root():
    return {"Hello": "Cinemax"}
