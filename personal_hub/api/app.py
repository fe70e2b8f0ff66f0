from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from personal_hub.api.errors import register_error_handlers
from personal_hub.api.routes_auth import router as auth_router
from personal_hub.api.routes_dashboard import router as dashboard_router
from personal_hub.api.routes_events import router as events_router
from personal_hub.api.routes_export import router as export_router
from personal_hub.api.routes_goals import router as goals_router
from personal_hub.api.routes_health import router as health_router
from personal_hub.api.routes_moments import router as moments_router
from personal_hub.api.routes_notes import router as notes_router
from personal_hub.api.routes_pomodoro import router as pomodoro_router
from personal_hub.api.routes_search import router as search_router
from personal_hub.api.routes_todos import router as todos_router
from personal_hub.config import settings

app = FastAPI(title="personal-hub")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["Content-Disposition"],
)

register_error_handlers(app)

app.include_router(health_router)
app.include_router(auth_router)
app.include_router(todos_router)
app.include_router(goals_router)
app.include_router(events_router)
app.include_router(notes_router)
app.include_router(moments_router)
app.include_router(pomodoro_router)
app.include_router(search_router)
app.include_router(dashboard_router)
app.include_router(export_router)


@app.on_event("startup")
async def on_startup() -> None:
    logger.info("API started timezone={} cors_origins={}", settings.timezone, settings.cors_origins)
