import logging

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from seenai.config.settings import get_settings
from seenai.db.database import engine
from seenai.models import db_models
from seenai.routers import preview_router, videos_router
from seenai.routers.auth_router import auth_router

settings = get_settings()
logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

# import models to create tables
db_models.Base.metadata.create_all(bind=engine)

app = FastAPI(title="SeenAI")


@app.get("/")
async def root():
    return {"message": "SeenAI API is running"}


app.include_router(router=auth_router, prefix="/api/auth")

app.include_router(router=videos_router.router)  # prefix is defined in the router itself
app.include_router(router=preview_router.router)

if settings.storage_backend == "local":
    from seenai.utils.storage import get_storage
    app.mount("/media", StaticFiles(directory=str(get_storage().base_path)), name="media")
