"""Main FastAPI application"""

from config import settings
from context.lifespan import lifespan
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from middleware.logging import log_requests
from routes import api_router, websocket_router

app = FastAPI(
    title="AC Relay Server",
    version="1.0.0",
    lifespan=lifespan
)

# CORS middleware (ESP32 and dashboards connect from anywhere)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)

# Request logging middleware
app.middleware("http")(log_requests)

# Include routers
app.include_router(api_router)
app.include_router(websocket_router)

# Dashboard assets
if settings.STATIC_DIR.is_dir():
    app.mount("/static", StaticFiles(directory=settings.STATIC_DIR), name="static")


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=settings.PORT)
