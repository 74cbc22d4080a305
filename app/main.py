import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.sessions import SessionMiddleware

from app.config import settings
from app.database import Base, engine
from app.models import doctor, lead, patient  # noqa: F401  (register tables)
from app.routers import doctors, google_auth, patients
from app.services.email_services import build_mailer
from app.services.google_auth_service import build_identity_provider
from app.utils.response import create_response, handle_exception

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title=settings.PROJECT_NAME)
app.add_middleware(
    SessionMiddleware,
    secret_key=settings.SESSION_SECRET,
    max_age=24 * 60 * 60,
    https_only=settings.APP_ENV == "production",
)

# Auto create tables
Base.metadata.create_all(bind=engine)

# CORS for SPA / API access
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)


# Mail and identity clients live for the whole process
@app.on_event("startup")
async def startup_event():
    app.state.mailer = build_mailer(settings)
    app.state.identity_provider = build_identity_provider(settings)
    logger.info("%s started (env=%s)", settings.PROJECT_NAME, settings.APP_ENV)


@app.on_event("shutdown")
async def shutdown_event():
    app.state.mailer.close()
    await app.state.identity_provider.aclose()


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.info("Malformed request body on %s: %s", request.url.path, exc.errors())
    return create_response(
        "Request body is missing or malformed",
        status_code=status.HTTP_400_BAD_REQUEST,
        error="MISSING_FIELDS",
    )


# Add routes
app.include_router(google_auth.router)
app.include_router(doctors.router)
app.include_router(patients.router)


@app.get("/")
def home():
    try:
        return create_response(
            message="ECare+ Backend is running",
            data={"service": "ecare-backend"},
            status_code=status.HTTP_200_OK,
        )
    except Exception as exc:
        return handle_exception(exc)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("app.main:app", host="0.0.0.0", port=settings.PORT)
