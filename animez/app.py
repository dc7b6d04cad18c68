from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles
from animez.core import settings
from animez.core import database
from animez.core.logger import logger
from fastapi.middleware.cors import CORSMiddleware

# Import routes
from animez.routes import user, post, comment, notification, admin, anime


@asynccontextmanager
async def lifespan(app: FastAPI):
    await database.init_db()
    logger.info("Database initialised")
    yield
    await database.engine.dispose()


app = FastAPI(title="AnimeZ API", lifespan=lifespan)

origins = ["*"]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(user.router)
app.include_router(post.router)
app.include_router(comment.router)
app.include_router(notification.router)
app.include_router(admin.router)
app.include_router(anime.router)

# Serve uploaded files
app.mount("/uploads", StaticFiles(directory=settings.UPLOAD_DIR, check_dir=False), name="uploads")


@app.get("/")
async def root():
    return {"message": "AnimeZ API"}


@app.get("/health")
async def health_check():
    return {"status": "healthy"}
