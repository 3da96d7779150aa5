# habit_tracker/main.py
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
import logging

# --- Import Core Backend Components ---
from habit_tracker.config import CORS_ORIGINS, LOG_LEVEL, require_jwt_settings
from habit_tracker.routers import auth, habits, profile
from habit_tracker.utils.database import create_tables, engine


logging.basicConfig(level=LOG_LEVEL); logger = logging.getLogger("habit_tracker")


@asynccontextmanager
async def lifespan(app: FastAPI):
    # refuse to start without signing configuration
    require_jwt_settings()
    logger.info("Application Startup: Creating database tables...")
    await create_tables()
    logger.info("Application Startup: Tables created successfully.")
    yield
    await engine.dispose()
    logger.info("Application Shutdown: Goodbye!")


app = FastAPI(title="Habit Tracker API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware, allow_origins=CORS_ORIGINS, allow_credentials=True,
    allow_methods=["*"], allow_headers=["*"],
)

# --- Include Routers ---
logger.info("Including routers...")
app.include_router(auth.router)     # /auth/register, /auth/login
app.include_router(profile.router)  # /me
app.include_router(habits.router)   # /habits/...
logger.info("Routers included.")


@app.get("/health")
def health_check():
    return {"status": "ok"}
