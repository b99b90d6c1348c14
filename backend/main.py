import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from backend.auth.middleware import TokenAuthMiddleware
from backend.core import config
from backend.core.cors import CORS_HEADERS, StaticCORSMiddleware
from backend.database import ensure_schema
from backend.routes import auth_routes, website_routes

app = FastAPI(title='Website Tracker API')

# The CORS layer is outermost so token rejections carry its headers.
app.add_middleware(TokenAuthMiddleware)
app.add_middleware(StaticCORSMiddleware)

logger = logging.getLogger(__name__)


def configure_logging() -> None:
    logging.basicConfig(
        level=config.LOG_LEVEL.upper(),
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )


@app.on_event('startup')
def initialize_application() -> None:
    configure_logging()
    config.validate_runtime_config()
    try:
        ensure_schema()
    except SQLAlchemyError:
        logger.exception('Database initialization failed. Check DATABASE_URL.')


@app.exception_handler(StarletteHTTPException)
async def render_http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    message = exc.detail
    if exc.status_code == status.HTTP_405_METHOD_NOT_ALLOWED:
        message = website_routes.METHOD_NOT_ALLOWED_MESSAGE
    return JSONResponse(
        status_code=exc.status_code,
        content={'msg': message},
        headers=getattr(exc, 'headers', None),
    )


@app.exception_handler(RequestValidationError)
async def render_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={'msg': 'Invalid request body', 'errors': jsonable_encoder(exc.errors())},
    )


@app.exception_handler(Exception)
async def render_unhandled_exception(request: Request, exc: Exception) -> JSONResponse:
    logger.error('Unhandled error on %s %s', request.method, request.url.path, exc_info=exc)
    # Rendered outside the middleware stack, so the CORS headers are added here.
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={'msg': website_routes.SERVER_ERROR_MESSAGE},
        headers=CORS_HEADERS,
    )


@app.get('/')
def root():
    return {'status': 'Website Tracker API Running'}


app.include_router(auth_routes.router, prefix='/auth')
app.include_router(website_routes.router, prefix='/websites')
