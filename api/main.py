"""
FastAPI main application for the Book Records API.
"""

import time
from contextlib import asynccontextmanager
from typing import Optional

import structlog
from fastapi import Depends, FastAPI, Query, Request, status
from fastapi.responses import JSONResponse, PlainTextResponse

from api.config import config as api_config
from api.models import (
    BookListResponse, BookResponse, CountResponse, ErrorResponse,
    IdResponse, PriceResponse
)
from bookstore.errors import BookServiceError
from bookstore.models import BookCreate, BookFilters
from bookstore.service import BookService
from utilities.config import ServerConfig, config as server_config
from utilities.logger import (
    LoggerRegistry, LoggingObserver, RequestCounter, RequestLogger,
    UnknownLevelError, UnknownLoggerError, setup_logging
)

# Setup logging
logger = structlog.get_logger(__name__)


def create_app(
    settings: Optional[ServerConfig] = None,
    book_service: Optional[BookService] = None
) -> FastAPI:
    """
    Build the application with its own book service and request counter.

    Args:
        settings: Server settings, defaults to the environment configuration
        book_service: Service to expose, a fresh in-memory one by default
    """
    settings = settings or server_config

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan manager."""
        setup_logging(
            log_level=settings.log_level,
            log_format=settings.log_format,
            log_file=settings.get_log_file_path(),
            debug=settings.debug,
            logger_levels={
                "request-logger": settings.request_logger_level,
                "books-logger": settings.books_logger_level,
            }
        )
        logger.info("Starting Book Records API", filter_mode=settings.filter_mode.value)
        yield
        logger.info(
            "Shutting down Book Records API",
            requests_served=app.state.request_counter.count,
            books=app.state.book_service.store.count()
        )

    app = FastAPI(
        title=api_config.api_title,
        description=api_config.api_description,
        version=api_config.api_version,
        lifespan=lifespan
    )

    app.state.book_service = book_service or BookService(
        observer=LoggingObserver(),
        filter_mode=settings.filter_mode
    )
    app.state.request_counter = RequestCounter()
    app.state.request_logger = RequestLogger()
    app.state.logger_registry = LoggerRegistry()

    app.middleware("http")(log_requests)
    app.add_exception_handler(BookServiceError, book_error_handler)
    app.add_exception_handler(Exception, general_exception_handler)
    register_routes(app)
    return app


async def log_requests(request: Request, call_next):
    """Number every request and log it with its duration."""
    request_id = request.app.state.request_counter.next()
    request_logger: RequestLogger = request.app.state.request_logger
    request_logger.bind_request(request_id)
    request_logger.log_incoming(request_id, request.url.path, request.method)
    begin = time.perf_counter()
    try:
        return await call_next(request)
    finally:
        request_logger.log_duration(request_id, (time.perf_counter() - begin) * 1000)


# Exception handlers
async def book_error_handler(request: Request, exc: BookServiceError):
    """Answer a rejected book operation with the error envelope."""
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(errorMessage=exc.message).dict()
    )


async def general_exception_handler(request: Request, exc: Exception):
    """Handle general exceptions."""
    logger.error("Unhandled exception", error=str(exc), path=request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=ErrorResponse(
            errorMessage=f"Internal server error: {exc}" if api_config.debug else "Internal server error"
        ).dict()
    )


def get_book_service(request: Request) -> BookService:
    return request.app.state.book_service


def get_logger_registry(request: Request) -> LoggerRegistry:
    return request.app.state.logger_registry


def get_book_filters(
    author: Optional[str] = Query(None),
    price_bigger_than: Optional[int] = Query(None, alias="price-bigger-than"),
    price_less_than: Optional[int] = Query(None, alias="price-less-than"),
    year_bigger_than: Optional[int] = Query(None, alias="year-bigger-than"),
    year_less_than: Optional[int] = Query(None, alias="year-less-than"),
    genres: Optional[str] = Query(None)
) -> BookFilters:
    """Collect the optional book filters from the query string."""
    return BookFilters(
        author=author,
        price_bigger_than=price_bigger_than,
        price_less_than=price_less_than,
        year_bigger_than=year_bigger_than,
        year_less_than=year_less_than,
        genres=genres
    )


def register_routes(app: FastAPI) -> None:

    # Health check endpoint
    @app.get("/books/health", response_class=PlainTextResponse, tags=["Health"])
    async def health_check():
        """Health check endpoint."""
        return "OK"

    # Books endpoints
    @app.post("/book", response_model=IdResponse, tags=["Books"])
    async def create_book(
        book: BookCreate,
        service: BookService = Depends(get_book_service)
    ):
        """
        Create a new book and return its id.

        Rejected with 409 when the title already exists (ignoring case),
        the year is outside [1940, 2100] or the price is not positive.
        """
        return IdResponse(result=service.create(book))

    @app.get("/books/total", response_model=CountResponse, tags=["Books"])
    async def get_books_total(
        filters: BookFilters = Depends(get_book_filters),
        service: BookService = Depends(get_book_service)
    ):
        """
        Count books matching the filters.

        - **author**: case-insensitive author
        - **price-bigger-than** / **price-less-than**: bounds (inclusive)
        - **year-bigger-than** / **year-less-than**: year bounds (inclusive)
        - **genres**: comma-separated upper-case genres
        """
        return CountResponse(result=service.count_matching(filters))

    @app.get("/books", response_model=BookListResponse, tags=["Books"])
    async def get_books(
        filters: BookFilters = Depends(get_book_filters),
        service: BookService = Depends(get_book_service)
    ):
        """List books matching the filters, sorted by title."""
        return BookListResponse(result=service.list_matching(filters))

    @app.get("/book", response_model=BookResponse, tags=["Books"])
    async def get_book(
        book_id: int = Query(..., alias="id"),
        service: BookService = Depends(get_book_service)
    ):
        """Get a single book by id."""
        return BookResponse(result=service.get_by_id(book_id))

    @app.put("/book", response_model=PriceResponse, tags=["Books"])
    async def update_book_price(
        book_id: int = Query(..., alias="id"),
        price: int = Query(...),
        service: BookService = Depends(get_book_service)
    ):
        """Update a book price and return the previous one."""
        return PriceResponse(result=service.update_price(book_id, price))

    @app.delete("/book", response_model=CountResponse, tags=["Books"])
    async def delete_book(
        book_id: int = Query(..., alias="id"),
        service: BookService = Depends(get_book_service)
    ):
        """Delete a book and return how many books remain."""
        return CountResponse(result=service.delete_by_id(book_id))

    # Log level endpoints
    @app.get("/logs/level", response_class=PlainTextResponse, tags=["Logs"])
    async def get_log_level(
        logger_name: str = Query(..., alias="logger-name"),
        registry: LoggerRegistry = Depends(get_logger_registry)
    ):
        """Get the current level of a server logger."""
        try:
            return registry.get_level(logger_name)
        except UnknownLoggerError:
            return PlainTextResponse("No logger found", status_code=status.HTTP_404_NOT_FOUND)

    @app.put("/logs/level", response_class=PlainTextResponse, tags=["Logs"])
    async def set_log_level(
        logger_name: str = Query(..., alias="logger-name"),
        logger_level: str = Query(..., alias="logger-level"),
        registry: LoggerRegistry = Depends(get_logger_registry)
    ):
        """
        Set the level of a server logger.

        - **logger-name**: request-logger or books-logger
        - **logger-level**: ERROR, WARN, INFO, DEBUG or TRACE
        """
        try:
            return registry.set_level(logger_name, logger_level)
        except UnknownLevelError:
            return PlainTextResponse("No level found", status_code=status.HTTP_404_NOT_FOUND)
        except UnknownLoggerError:
            return PlainTextResponse("No logger found", status_code=status.HTTP_404_NOT_FOUND)


# Create FastAPI application
app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "api.main:app",
        host=api_config.host,
        port=api_config.port,
        reload=api_config.debug,
        log_level="info"
    )
