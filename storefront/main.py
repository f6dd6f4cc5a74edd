from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager

from .db.init_db import init_db
from .api import auth, cart, products, users
from .core.config import settings
from .exception_handlers import register_exception_handlers
from .middleware import RequestLoggingMiddleware


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    yield


app = FastAPI(
    title="Storefront API",
    version="0.1.0",
    lifespan=lifespan,
    docs_url="/api/docs",
    redoc_url="/api/redoc",
)

# ADD MIDDLEWARES
## ADD REQUEST LOGGING MIDDLEWARE
app.add_middleware(RequestLoggingMiddleware)

## ADD CORS MIDDLEWARE
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=settings.allow_credentials,
    allow_methods=settings.allowed_methods,
    allow_headers=["*"],
)

register_exception_handlers(app)

app.include_router(auth.router)
app.include_router(users.router)
app.include_router(products.router)
app.include_router(cart.router)


@app.get("/api/health", include_in_schema=False)
def health():
    return {"success": True, "message": "Storefront API is running"}
