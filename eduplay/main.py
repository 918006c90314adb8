from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from eduplay import config
from eduplay.api import admin, health, routes
from eduplay.middleware.logging_middleware import LoggingMiddleware
import logging

# Configure logging
logging.basicConfig(level=logging.DEBUG if config.DEBUG_MODE else logging.INFO)
logger = logging.getLogger(__name__)

app = FastAPI(title=config.APP_TITLE)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # In production, replace with specific origins
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(LoggingMiddleware)

@app.on_event("startup")
async def startup_event():
    logger.info(f"{config.APP_TITLE} starting up (store provider: {config.DATABASE_PROVIDER})")
    if config.DATABASE_PROVIDER == "supabase":
        missing = config.missing_store_settings()
        if missing:
            logger.warning(f"Missing store settings: {', '.join(missing)}; store calls will fail")

app.include_router(routes.router)
app.include_router(admin.router)
app.include_router(health.router)

@app.get("/")
def root():
    logger.debug("Root endpoint accessed")
    return {"message": f"Welcome to the {config.APP_TITLE}"}
