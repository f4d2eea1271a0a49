# backoffice/main.py
from typing import Any, Dict, List, Optional
from fastapi import APIRouter, Body, FastAPI, HTTPException, Depends, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
import logging

from backoffice import schemas
from backoffice.config import Settings, get_settings
from backoffice.database import Database
from backoffice.errors import NotFound, StorageError, ValidationError
from backoffice.models import Registration
from backoffice.stores import DashboardStats, RegistrationStore, SettingsStore

logger = logging.getLogger("backoffice")

router = APIRouter()


def get_db(request: Request):
    db = request.app.state.db.session()
    try:
        yield db
    finally:
        db.close()


def _registration_out(registration: Registration, course_title: Optional[str]) -> schemas.RegistrationOut:
    out = schemas.RegistrationOut.model_validate(registration)
    out.course_title = course_title
    return out


# Registrations
@router.get("/registrations", response_model=List[schemas.RegistrationOut])
def list_registrations(status: Optional[str] = Query(None), db: Session = Depends(get_db)):
    # an empty filter means no filter
    rows = RegistrationStore(db).list(status=status or None)
    return [_registration_out(registration, title) for registration, title in rows]


@router.get("/registrations/{registration_id}", response_model=schemas.RegistrationOut)
def get_registration(registration_id: int, db: Session = Depends(get_db)):
    registration, title = RegistrationStore(db).get(registration_id)
    return _registration_out(registration, title)


# Public enrollment form posts here; status and timestamp are always server-assigned
@router.post("/registrations", response_model=schemas.RegistrationCreated, status_code=201)
def create_registration(registration_in: schemas.RegistrationCreate, db: Session = Depends(get_db)):
    registration_id = RegistrationStore(db).create(
        course_id=registration_in.course_id,
        full_name=registration_in.full_name,
        email=registration_in.email,
        phone=registration_in.phone,
    )
    return schemas.RegistrationCreated(id=registration_id)


@router.patch("/registrations/{registration_id}", response_model=schemas.SuccessOut)
def update_registration_status(registration_id: int, update: schemas.RegistrationStatusUpdate,
                               db: Session = Depends(get_db)):
    RegistrationStore(db).transition(registration_id, update.status)
    return schemas.SuccessOut()


# Settings
@router.get("/settings", response_model=Dict[str, str])
def get_site_settings(db: Session = Depends(get_db)):
    return SettingsStore(db).get_all()


@router.post("/settings", response_model=schemas.SuccessOut)
def save_site_settings(updates: Dict[str, Any] = Body(...), db: Session = Depends(get_db)):
    SettingsStore(db).bulk_set(updates)
    return schemas.SuccessOut()


# Stats for the dashboard overview
@router.get("/stats", response_model=schemas.StatsOut)
def get_stats(db: Session = Depends(get_db)):
    return DashboardStats(db).collect()


def _register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(ValidationError)
    async def validation_error_handler(request: Request, exc: ValidationError):
        return JSONResponse(status_code=422, content={"detail": str(exc)})

    @app.exception_handler(NotFound)
    async def not_found_handler(request: Request, exc: NotFound):
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(StorageError)
    async def storage_error_handler(request: Request, exc: StorageError):
        cause = exc.__cause__
        return JSONResponse(
            status_code=500,
            content={"detail": str(exc), "cause": str(cause) if cause is not None else None},
        )


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()

    logging.basicConfig(level=settings.LOG_LEVEL)

    app = FastAPI(title=settings.APP_NAME, version=settings.APP_VERSION)
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    _register_error_handlers(app)

    # Open the database, create tables and seed default settings
    @app.on_event("startup")
    def startup():
        logger.info("Initializing database...")
        db = Database(settings.DATABASE_URL)
        db.init_db()
        session = db.session()
        try:
            SettingsStore(session).ensure_defaults(per_key=settings.SEED_MISSING_DEFAULTS)
        finally:
            session.close()
        app.state.db = db
        logger.info("Startup complete.")

    @app.on_event("shutdown")
    def shutdown():
        db = getattr(app.state, "db", None)
        if db is not None:
            db.close()

    # Root + health endpoints
    @app.get("/")
    def root():
        return {
            "service": settings.APP_NAME,
            "status": "running",
            "endpoints": [f"{settings.API_PREFIX}/registrations", f"{settings.API_PREFIX}/settings",
                          f"{settings.API_PREFIX}/stats", "/docs"],
        }

    @app.get("/health")
    def health(request: Request):
        try:
            request.app.state.db.ping()
        except SQLAlchemyError as e:
            logger.exception("Health check failed: %s", e)
            raise HTTPException(status_code=503, detail="Database unreachable")
        return {"status": "ok"}

    app.include_router(router, prefix=settings.API_PREFIX)
    return app


app = create_app()
