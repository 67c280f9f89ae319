# coursehub/main.py
import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from coursehub import models  # noqa
from coursehub.api.endpoints import (
    auth,
    categories,
    enrollments,
    health,
    reports,
    reviews,
    training_schedules,
    trainings,
)
from coursehub.core.config import settings
from coursehub.core.exceptions import register_exception_handlers
from coursehub.core.logging_config import setup_logging
from coursehub.db.init_db import init_db

setup_logging()

app = FastAPI(title=settings.PROJECT_NAME)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)


@app.on_event("startup")
def on_startup():
    init_db()


app.include_router(health.router)
for module in (auth, categories, trainings, training_schedules, enrollments, reviews, reports):
    app.include_router(module.router, prefix=settings.API_PREFIX)


if __name__ == "__main__":
    uvicorn.run("coursehub.main:app", host=settings.HOST, port=settings.PORT)
