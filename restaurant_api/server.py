"""FastAPI server exposing CRUD endpoints for restaurant records."""

import logging
from contextlib import asynccontextmanager
from pathlib import Path

import uvicorn
from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.templating import Jinja2Templates
from pydantic import ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from restaurant_api.config import get_config, setup_logging
from restaurant_api.models import Restaurant, RestaurantPayload
from restaurant_api.services import (
    RestaurantNotFoundError,
    RestaurantStore,
    StoreError,
)

logger = logging.getLogger(__name__)

templates = Jinja2Templates(directory=Path(__file__).parent / "templates")

FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


class InvalidPayloadError(Exception):
    """Raised when a request body cannot be bound to a restaurant payload."""

    def __init__(self, message: str, fields: list[str] | None = None) -> None:
        super().__init__(message)
        self.fields = fields or []


@asynccontextmanager
async def lifespan(_app: FastAPI):
    """Application lifespan manager."""
    config = get_config()
    logger.info(f"Starting Restaurant API on {config.server_host}:{config.server_port}")

    try:
        store = RestaurantStore(config.database_path)
    except StoreError:
        logger.critical(f"Cannot open restaurant database at {config.database_path}")
        raise

    # Store in app state for dependency injection
    _app.state.restaurant_store = store

    yield

    logger.info("Shutting down Restaurant API")
    _app.state.restaurant_store = None
    store.close()


app = FastAPI(
    title="Restaurant API",
    description="CRUD API for restaurant records",
    version="0.1.0",
    lifespan=lifespan,
)

router = APIRouter(tags=["restaurants"])


def get_restaurant_store(request: Request) -> RestaurantStore:
    """Dependency to get the restaurant store from app state.

    Args:
        request: FastAPI request object

    Returns:
        The shared restaurant store

    Raises:
        HTTPException: If the store is not initialized
    """
    store = getattr(request.app.state, "restaurant_store", None)
    if store is None:
        from fastapi import HTTPException

        raise HTTPException(status_code=503, detail="Store not initialized yet")
    return store


async def get_restaurant_payload(request: Request) -> RestaurantPayload:
    """Bind a JSON or form body to a restaurant payload.

    Raises:
        InvalidPayloadError: If the body is unreadable or fails validation
    """
    content_type = request.headers.get("content-type", "")

    try:
        if content_type.startswith(FORM_CONTENT_TYPES):
            data = dict(await request.form())
        else:
            data = await request.json()
    except ValueError as e:
        # JSONDecodeError and UnicodeDecodeError
        raise InvalidPayloadError(f"Malformed JSON body: {e}") from e

    logger.debug(f"Request body contains: {data}")

    try:
        return RestaurantPayload.model_validate(data)
    except ValidationError as e:
        # A non-object body fails with an empty location
        fields = [
            ".".join(str(part) for part in err["loc"]) or "body" for err in e.errors()
        ]
        raise InvalidPayloadError(str(e), fields=fields) from e


def wants_json(request: Request) -> bool:
    """Decide between a JSON body and an HTML page for read endpoints."""
    if request.query_params.get("format") == "json":
        return True
    return "application/json" in request.headers.get("accept", "")


@app.exception_handler(InvalidPayloadError)
async def invalid_payload_handler(request: Request, exc: InvalidPayloadError):
    logger.warning(f"Invalid request to {request.url.path}: {exc}")
    return JSONResponse(
        status_code=400,
        content={"error": "Invalid request", "fields": exc.fields},
    )


@app.exception_handler(RestaurantNotFoundError)
async def restaurant_not_found_handler(request: Request, exc: RestaurantNotFoundError):
    logger.info(f"{exc} ({request.method} {request.url.path})")
    return JSONResponse(status_code=404, content={"error": "Restaurant not found"})


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    logger.info(f"HTTP {exc.status_code} on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=exc.headers,
    )


@app.exception_handler(StoreError)
async def store_error_handler(request: Request, exc: StoreError):
    logger.error(f"Store error on {request.method} {request.url.path}", exc_info=exc)
    return JSONResponse(status_code=500, content={"error": "Internal Server Error"})


@app.get("/health")
async def health_check():
    """Health check endpoint for monitoring."""
    return {"status": "healthy", "service": "restaurant-api"}


@router.get("/restaurants")
@router.get("/restaurants/get")
def list_restaurants(
    request: Request,
    store: RestaurantStore = Depends(get_restaurant_store),
):
    """List every restaurant as an HTML page or a JSON array."""
    restaurants = store.list_restaurants()

    if wants_json(request):
        return [restaurant.model_dump(mode="json") for restaurant in restaurants]

    return templates.TemplateResponse(
        request,
        "restaurants.html",
        {"title": "Restaurants List", "restaurants": restaurants},
    )


@router.get("/restaurant/{restaurant_id}")
def get_restaurant(
    restaurant_id: str,
    request: Request,
    store: RestaurantStore = Depends(get_restaurant_store),
):
    """Fetch one restaurant by id."""
    restaurant = store.get_restaurant(restaurant_id)

    if wants_json(request):
        return restaurant.model_dump(mode="json")

    return templates.TemplateResponse(
        request,
        "restaurant.html",
        {"title": restaurant.name, "restaurant": restaurant},
    )


@router.post("/restaurants/create", status_code=201, response_model=Restaurant)
def create_restaurant(
    payload: RestaurantPayload = Depends(get_restaurant_payload),
    store: RestaurantStore = Depends(get_restaurant_store),
):
    """Create a restaurant from a JSON or form body.

    Request body:
        {"name": "Le Pigeon", "stars": 4, "address": "123 Main", "chef": "Gabriel"}

    Returns:
        The stored restaurant including its assigned id
    """
    return store.create_restaurant(payload)


@router.api_route(
    "/restaurants/update/{restaurant_id}",
    methods=["PUT", "PATCH"],
    response_model=Restaurant,
)
def update_restaurant(
    restaurant_id: str,
    payload: RestaurantPayload = Depends(get_restaurant_payload),
    store: RestaurantStore = Depends(get_restaurant_store),
):
    """Replace every mutable field of an existing restaurant."""
    return store.update_restaurant(restaurant_id, payload)


@router.delete("/restaurants/delete/{restaurant_id}")
def delete_restaurant(
    restaurant_id: str,
    store: RestaurantStore = Depends(get_restaurant_store),
):
    """Delete a restaurant by id."""
    logger.info(f"Deleting restaurant {restaurant_id}")
    store.delete_restaurant(restaurant_id)
    return {"message": "Restaurant deleted successfully"}


app.include_router(router)
# Versioned aliases, e.g. /api/v1/restaurants/get
app.include_router(router, prefix="/api/v1")


def run_server():
    """Run the FastAPI server using uvicorn.

    This is the main entry point for the server.
    """

    # Setup logging
    setup_logging()

    # Get config
    config = get_config()

    # Run server
    uvicorn.run(
        "restaurant_api.server:app",
        host=config.server_host,
        port=config.server_port,
        log_level=config.log_level.lower(),
        reload=False,
    )


if __name__ == "__main__":
    run_server()
