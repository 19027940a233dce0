from fastapi import APIRouter, FastAPI
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError

from src.core.errors.exceptions import (
    AccessForbiddenException,
    CoreException,
    InfrastructureException,
    InstanceAlreadyExistsException,
    InstanceNotFoundException,
    InstanceProcessingException,
    UnauthorizedException,
)
from src.core.errors.handlers import (
    AccessForbiddenExceptionHandler,
    CoreExceptionHandler,
    InfrastructureExceptionHandler,
    InstanceAlreadyExistsExceptionHandler,
    InstanceNotFoundExceptionHandler,
    InstanceProcessingExceptionHandler,
    RequestValidationExceptionHandler,
    UnauthorizedExceptionHandler,
    ValidationErrorExceptionHandler,
    as_exception_handler,
)
from src.system import routers as system_routers
from src.user import routers as user_routers
from src.user.auth import routers as auth_routers

CORE_EXCEPTION_HANDLERS: dict[type[CoreException], CoreExceptionHandler] = {
    CoreException: CoreExceptionHandler(),
    InfrastructureException: InfrastructureExceptionHandler(),
    InstanceNotFoundException: InstanceNotFoundExceptionHandler(),
    InstanceAlreadyExistsException: InstanceAlreadyExistsExceptionHandler(),
    InstanceProcessingException: InstanceProcessingExceptionHandler(),
    UnauthorizedException: UnauthorizedExceptionHandler(),
    AccessForbiddenException: AccessForbiddenExceptionHandler(),
}


def include_routers(app: FastAPI) -> None:
    """
    Includes API routers into the FastAPI application.

    Parameters:
        app (FastAPI): The FastAPI application instance to which routers will
        be added.
    """
    api_router = APIRouter()
    api_router.include_router(auth_routers.router, prefix="/auth", tags=["Auth"])
    api_router.include_router(user_routers.router, prefix="/users", tags=["Users"])

    app.include_router(api_router, prefix="/api")
    app.include_router(system_routers.router, tags=["System"])


def include_exceptions_handlers(app: FastAPI) -> None:
    """
    Registers exception handlers for the custom exceptions and for validation
    errors with the provided FastAPI application instance.

    Parameters:
        app (FastAPI): The FastAPI application instance to which the exception handlers
        will be added.
    """
    app.add_exception_handler(
        RequestValidationError,
        as_exception_handler(RequestValidationExceptionHandler()),
    )
    app.add_exception_handler(
        ValidationError, as_exception_handler(ValidationErrorExceptionHandler())
    )
    for exception_type, handler in CORE_EXCEPTION_HANDLERS.items():
        app.add_exception_handler(exception_type, as_exception_handler(handler))
