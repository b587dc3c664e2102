"""
Wayfinder Engine: FastAPI Application Entry Point.

This module exposes the destination scoring engine and the photo location
analytics over HTTP.

Architecture:
    Every request reads one snapshot of the trip/photo store (off the event
    loop, exactly once) and runs the synchronous, stateless core on it. The
    destination catalog is loaded once at startup and shared read-only.

Endpoints:
    - POST /api/v1/suggestions/locations: Ranked destination suggestions
    - GET /api/v1/analytics/travel-history: Derived travel profile
    - GET /api/v1/analytics/locations: Location clusters summary
    - GET /api/v1/photos/geotagged: Photos with coordinates
    - GET /api/v1/photos/nearby: Photos within a radius
    - GET /api/v1/trips/{trip_id}/locations: Trip route from photo positions
    - GET /api/v1/destinations: Destination catalog
    - GET /api/v1/health: Service health check
"""

import logging
import math
from contextlib import asynccontextmanager
from typing import List, Optional

from fastapi import Depends, FastAPI, HTTPException, Query
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import settings
from .core import (
    DataUnavailableError,
    DestinationCatalog,
    LocationAnalytics,
    ScoringEngine,
    TravelHistoryAggregator,
    TravelSnapshot,
    ValidationError,
    WayfinderError,
)
from .core.geo import validate_geo_point
from .core.scoring import validate_filters
from .repository import TravelRepository, create_repository
from .schemas import (
    DestinationResponse,
    ErrorResponse,
    HealthResponse,
    LocationAnalyticsResponse,
    LocationClusterResponse,
    NearbyPhotoResponse,
    NearbyPhotosResponse,
    PhotoResponse,
    RoutePointResponse,
    ScoredDestinationResponse,
    SuggestionRequest,
    SuggestionResponse,
    TravelHistoryResponse,
    TripRouteResponse,
)

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


# Singleton instances
_catalog: Optional[DestinationCatalog] = None
_repository: Optional[TravelRepository] = None


def get_catalog() -> DestinationCatalog:
    """Get or load the destination catalog singleton."""
    global _catalog
    if _catalog is None:
        _catalog = DestinationCatalog.from_json(settings.DESTINATIONS_DATA_PATH)
    return _catalog


def get_repository() -> TravelRepository:
    """Get or create the trip/photo repository singleton."""
    global _repository
    if _repository is None:
        _repository = create_repository(settings)
    return _repository


def get_aggregator() -> TravelHistoryAggregator:
    return TravelHistoryAggregator(default_duration_days=settings.DEFAULT_TRIP_DURATION_DAYS)


async def load_snapshot(repository: TravelRepository) -> TravelSnapshot:
    """Read the trip/photo store once for the current request."""
    return await run_in_threadpool(repository.load_snapshot)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager for startup/shutdown events.

    Startup:
        - Load and validate the destination catalog
        - Create the trip/photo repository

    Shutdown:
        - Close the repository connection when it holds one
    """
    logger.info(f"Starting {settings.APP_NAME}...")

    catalog = get_catalog()
    logger.info(f"Catalog ready: {len(catalog)} destinations")

    repository = get_repository()
    logger.info(f"Store ready: {repository.describe()}")

    logger.info(f"{settings.APP_NAME} ready on port {settings.PORT}")

    yield

    logger.info(f"Shutting down {settings.APP_NAME}...")
    close = getattr(_repository, "close", None)
    if close is not None:
        close()


# Create FastAPI application
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="""
    ## Wayfinder Engine

    Destination recommendations and photo location analytics:

    - **Multi-factor scoring**: hard filters, travel-history personalization,
      weather/safety/crowd weighting and a small random jitter
    - **Travel profile**: visited places, seasonal preferences, usual trip length
    - **Location analytics**: photo clusters, nearby photos, trip routes
    """,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# SUGGESTION ENDPOINTS
# =============================================================================

@app.post(
    f"{settings.API_V1_PREFIX}/suggestions/locations",
    response_model=SuggestionResponse,
    tags=["Suggestions"],
    summary="Get personalized destination suggestions",
    description="""
    Rank catalog destinations for the given filters and search query.

    **Hard filters**: search text, categories, budget, accessibility, distance

    **Soft scoring**: travel history, weather, safety, crowds, trip duration
    """
)
async def suggest_locations(
    request: SuggestionRequest,
    catalog: DestinationCatalog = Depends(get_catalog),
    repository: TravelRepository = Depends(get_repository),
):
    """
    Destination suggestion endpoint.

    Args:
        request: SuggestionRequest with filters, query and optional history

    Returns:
        SuggestionResponse with at most MAX_SUGGESTIONS ranked destinations
    """
    try:
        criteria = request.filters.to_criteria()
        # Reject bad filters before touching the store
        validate_filters(criteria)

        if request.user_history is not None:
            history = request.user_history.to_history()
            history_source = "supplied"
        else:
            snapshot = await load_snapshot(repository)
            history = get_aggregator().aggregate(snapshot.trips, snapshot.photos)
            history_source = "stored"

        engine = ScoringEngine(catalog, max_results=settings.MAX_SUGGESTIONS)
        results = engine.score(
            criteria,
            request.search_query,
            history,
            diversity_seed=request.diversity_seed
        )

        return SuggestionResponse(
            suggestions=[ScoredDestinationResponse.from_scored(r) for r in results],
            count=len(results),
            history_source=history_source,
            metadata={
                "catalog_size": len(catalog),
                "search_query": request.search_query.strip(),
            }
        )

    except WayfinderError:
        raise
    except Exception as e:
        logger.error(f"Suggestion endpoint error: {e}")
        raise HTTPException(status_code=500, detail=str(e))


@app.get(
    f"{settings.API_V1_PREFIX}/destinations",
    response_model=List[DestinationResponse],
    tags=["Suggestions"],
    summary="List the destination catalog"
)
async def list_destinations(
    category: Optional[str] = None,
    catalog: DestinationCatalog = Depends(get_catalog),
):
    """Return every catalog destination, optionally restricted to one category."""
    destinations = catalog.get_all()
    if category:
        destinations = [d for d in destinations if d.category.value == category.lower()]
    return [DestinationResponse.from_destination(d) for d in destinations]


# =============================================================================
# ANALYTICS ENDPOINTS
# =============================================================================

@app.get(
    f"{settings.API_V1_PREFIX}/analytics/travel-history",
    response_model=TravelHistoryResponse,
    tags=["Analytics"],
    summary="Derived travel profile"
)
async def travel_history(repository: TravelRepository = Depends(get_repository)):
    """Aggregate the travel profile from the current trips and photos."""
    snapshot = await load_snapshot(repository)
    history = get_aggregator().aggregate(snapshot.trips, snapshot.photos)
    return TravelHistoryResponse.from_history(history)


@app.get(
    f"{settings.API_V1_PREFIX}/analytics/locations",
    response_model=LocationAnalyticsResponse,
    tags=["Analytics"],
    summary="Location clusters summary"
)
async def location_analytics(repository: TravelRepository = Depends(get_repository)):
    """Group geotagged photos into locations and summarize them."""
    snapshot = await load_snapshot(repository)
    summary = LocationAnalytics(snapshot.photos).summary()

    return LocationAnalyticsResponse(
        total_geotagged_photos=summary["total_geotagged_photos"],
        unique_locations=summary["unique_locations"],
        top_locations=[LocationClusterResponse.from_cluster(c) for c in summary["top_locations"]],
        recent_locations=[LocationClusterResponse.from_cluster(c) for c in summary["recent_locations"]],
    )


# =============================================================================
# PHOTO LOCATION ENDPOINTS
# =============================================================================

@app.get(
    f"{settings.API_V1_PREFIX}/photos/geotagged",
    response_model=List[PhotoResponse],
    tags=["Photos"],
    summary="Photos with GPS coordinates"
)
async def geotagged_photos(repository: TravelRepository = Depends(get_repository)):
    snapshot = await load_snapshot(repository)
    return [PhotoResponse.from_photo(p) for p in LocationAnalytics(snapshot.photos).geotagged()]


@app.get(
    f"{settings.API_V1_PREFIX}/photos/nearby",
    response_model=NearbyPhotosResponse,
    tags=["Photos"],
    summary="Photos within a radius",
    description="Linear great-circle scan over all geotagged photos."
)
async def nearby_photos(
    lat: float = Query(..., description="Center latitude"),
    lng: float = Query(..., description="Center longitude"),
    radius: Optional[float] = Query(None, description="Radius in km (default 10)"),
    limit: Optional[int] = Query(None, description="Maximum number of photos returned"),
    repository: TravelRepository = Depends(get_repository),
):
    """
    Nearby photos endpoint.

    Args:
        lat: Center latitude
        lng: Center longitude
        radius: Search radius in kilometers
        limit: Optional cap on returned photos

    Returns:
        NearbyPhotosResponse with photos in collection order
    """
    radius_km = settings.NEARBY_DEFAULT_RADIUS_KM if radius is None else radius
    # Reject bad input before touching the store
    center = validate_geo_point(lat, lng, field="center")
    if not math.isfinite(radius_km) or radius_km < 0:
        raise ValidationError("radius_km", f"must be a finite number >= 0, got {radius_km}")

    snapshot = await load_snapshot(repository)
    analytics = LocationAnalytics(snapshot.photos, scan_limit=settings.NEARBY_SCAN_LIMIT)
    photos = analytics.nearby(center, radius_km, limit=limit)
    distances = analytics.distances_from(center, photos)

    return NearbyPhotosResponse(
        latitude=center.latitude,
        longitude=center.longitude,
        radius_km=radius_km,
        count=len(photos),
        photos=[
            NearbyPhotoResponse.from_photo(p, distance_km=round(d, 3))
            for p, d in zip(photos, distances)
        ]
    )


@app.get(
    f"{settings.API_V1_PREFIX}/trips/{{trip_id}}/locations",
    response_model=TripRouteResponse,
    tags=["Photos"],
    summary="Trip route from photo positions"
)
async def trip_locations(trip_id: str, repository: TravelRepository = Depends(get_repository)):
    """Geotagged photos of a trip ordered by capture time."""
    snapshot = await load_snapshot(repository)
    if not any(t.id == trip_id for t in snapshot.trips):
        raise HTTPException(status_code=404, detail=f"Trip not found: {trip_id}")

    points = LocationAnalytics(snapshot.photos).trip_route(trip_id)
    return TripRouteResponse(
        trip_id=trip_id,
        count=len(points),
        points=[RoutePointResponse(**p) for p in points]
    )


# =============================================================================
# SYSTEM ENDPOINTS
# =============================================================================

@app.get(
    f"{settings.API_V1_PREFIX}/health",
    response_model=HealthResponse,
    tags=["System"],
    summary="Health check",
    description="Check the health of all system components."
)
async def health_check():
    """Health check endpoint."""
    components = {}

    try:
        catalog = get_catalog()
        components["catalog"] = f"available ({len(catalog)} destinations)"
    except Exception as e:
        components["catalog"] = f"error: {e}"

    try:
        components["store"] = get_repository().describe()
    except Exception as e:
        components["store"] = f"error: {e}"

    errors = [v for v in components.values() if "error" in str(v).lower()]
    status = "healthy" if not errors else "degraded"

    return HealthResponse(
        status=status,
        version=settings.APP_VERSION,
        components=components
    )


# =============================================================================
# ROOT ENDPOINT
# =============================================================================

@app.get("/", tags=["Root"])
async def root():
    """Root endpoint with API information."""
    return {
        "name": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "docs": "/docs",
        "endpoints": {
            "health": f"{settings.API_V1_PREFIX}/health",
            "suggestions": f"{settings.API_V1_PREFIX}/suggestions/locations",
            "destinations": f"{settings.API_V1_PREFIX}/destinations",
            "analytics": {
                "travel_history": f"{settings.API_V1_PREFIX}/analytics/travel-history",
                "locations": f"{settings.API_V1_PREFIX}/analytics/locations"
            },
            "photos": {
                "geotagged": f"{settings.API_V1_PREFIX}/photos/geotagged",
                "nearby": f"{settings.API_V1_PREFIX}/photos/nearby",
                "trip_route": f"{settings.API_V1_PREFIX}/trips/{{trip_id}}/locations"
            }
        }
    }


# =============================================================================
# ERROR HANDLERS
# =============================================================================

@app.exception_handler(ValidationError)
async def validation_exception_handler(request, exc: ValidationError):
    """Invalid caller input: 400 naming the offending field."""
    logger.info(f"Rejected request to {request.url.path}: {exc}")
    return JSONResponse(
        status_code=400,
        content=ErrorResponse(
            error="validation_error",
            message=exc.message,
            details={"field": exc.field}
        ).model_dump()
    )


@app.exception_handler(DataUnavailableError)
async def data_unavailable_handler(request, exc: DataUnavailableError):
    """The trip/photo store could not be read; no partial result is returned."""
    logger.error(f"Store unavailable for {request.url.path}: {exc}")
    return JSONResponse(
        status_code=500,
        content=ErrorResponse(
            error="data_unavailable",
            message="Trip and photo data could not be read",
            details={"exception": str(exc)} if settings.DEBUG else None
        ).model_dump()
    )


@app.exception_handler(Exception)
async def global_exception_handler(request, exc):
    """Global exception handler for unhandled errors."""
    logger.error(f"Unhandled exception: {exc}")
    return JSONResponse(
        status_code=500,
        content=ErrorResponse(
            error="internal_error",
            message="An unexpected error occurred",
            details={"exception": str(exc)} if settings.DEBUG else None
        ).model_dump()
    )
