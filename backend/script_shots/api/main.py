from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from script_shots.api.routes import scenes, settings, shots
from script_shots.db.sqlite_db import init_db
from script_shots.infra.config import CORS_ORIGINS


@asynccontextmanager
async def lifespan(app: FastAPI):
    await init_db()
    yield


app = FastAPI(title="Script Shots", version="0.1.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(scenes.router)
app.include_router(shots.router)
app.include_router(settings.router)


@app.get("/api/health")
async def health():
    return {"status": "ok"}
