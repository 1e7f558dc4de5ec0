import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

import config
from database import Base, SessionLocal, engine
from errors import ParkingError, StorageError
from routers import faculties, fines, public, reservations, sessions, users, vehicles, zones
from schemas.common_schema import ErrorResponse

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

Base.metadata.create_all(bind=engine)

app = FastAPI(title="Campus Parking API")

app.include_router(public.router)
app.include_router(faculties.router)
app.include_router(users.user_router)
app.include_router(zones.router)
app.include_router(vehicles.router)
app.include_router(reservations.router)
app.include_router(sessions.router)
app.include_router(fines.router)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ParkingError)
async def parking_error_handler(request: Request, exc: ParkingError):
    if isinstance(exc, StorageError):
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.detail)
    return JSONResponse(status_code=exc.status_code, content=ErrorResponse(error=exc.name, detail=exc.detail).model_dump())


@app.exception_handler(SQLAlchemyError)
async def storage_error_handler(request: Request, exc: SQLAlchemyError):
    logger.error("Storage failure on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=StorageError.status_code,
        content=ErrorResponse(
            error=StorageError.__name__,
            detail="The request could not be completed. Please try again later.",
        ).model_dump(),
    )


@app.on_event("startup")
def on_startup():
    db = SessionLocal()
    try:
        users.create_default_admin_if_not_exists(db)
    finally:
        db.close()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
