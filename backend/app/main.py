from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.v1.routes.flights import router as flights_router
from app.api.v1.routes.health import router as health_router
from app.core.deps import get_config
from app.core.logging import configure_logging_if_needed


configure_logging_if_needed(get_config().log_level)

app = FastAPI(title="Quiet Slots API")

# The mobile client calls the API directly from any origin.
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health_router, prefix="/v1")
app.include_router(flights_router)
