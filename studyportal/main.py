import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from studyportal.core import config
from studyportal.core.errors import InternalError, PortalError, ValidationError
from studyportal.core.validation import format_validation_errors
from studyportal.database import Database
from studyportal.routes import auth_routes, task_routes

logger = logging.getLogger(__name__)


def create_app(database: Database | None = None) -> FastAPI:
    config.validate_runtime_config()
    owns_database = database is None
    database = database or Database()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        try:
            database.create_schema()
        except SQLAlchemyError:
            logger.exception('Database initialization failed. Check DATABASE_URL.')
        yield
        if owns_database:
            database.dispose()

    app = FastAPI(title='Study Portal API', lifespan=lifespan)
    app.state.database = database

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ALLOW_ORIGINS,
        allow_credentials=True,
        allow_methods=['GET', 'POST', 'PUT', 'DELETE', 'OPTIONS'],
        allow_headers=['Content-Type', 'Authorization'],
    )

    _register_error_handlers(app)

    prefix = config.API_PREFIX.rstrip('/')

    @app.get(f'{prefix}/health')
    def health():
        return {'status': 'OK', 'timestamp': datetime.now(timezone.utc).isoformat()}

    app.include_router(auth_routes.router, prefix=f'{prefix}/auth')
    app.include_router(task_routes.homework_router, prefix=f'{prefix}/homework')
    app.include_router(task_routes.assignments_router, prefix=f'{prefix}/assignments')
    return app


def _register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(PortalError)
    async def handle_portal_error(request: Request, exc: PortalError):
        return JSONResponse(status_code=exc.status_code, content=exc.to_body())

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError):
        error = ValidationError(format_validation_errors(exc))
        return JSONResponse(status_code=error.status_code, content=error.to_body())

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        if exc.status_code == status.HTTP_404_NOT_FOUND:
            message = 'API endpoint not found'
        else:
            message = exc.detail if isinstance(exc.detail, str) else 'Request failed'
        return JSONResponse(status_code=exc.status_code, content={'error': message}, headers=exc.headers)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.exception('Unhandled error on %s %s', request.method, request.url.path)
        message = 'Something went wrong!' if config.is_production() else str(exc) or exc.__class__.__name__
        error = InternalError(message)
        return JSONResponse(status_code=error.status_code, content=error.to_body())


config.configure_logging()
app = create_app()


if __name__ == '__main__':
    uvicorn.run('studyportal.main:app', host='127.0.0.1', port=8000, reload=True)
