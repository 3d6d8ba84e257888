import logging
import traceback
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse

from chaingate.api.auth import router as auth_router
from chaingate.api.chains import router as chains_router
from chaingate.api.errors import error_body, register_error_handlers
from chaingate.api.transactions import router as transactions_router
from chaingate.api.users import router as users_router
from chaingate.bootstrap import startup
from chaingate.config import configure_logging, settings
from chaingate.container import Container, shutdown_container

logger = logging.getLogger("chaingate.api")

VERSION = "0.1.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(settings.log_level)
    container = Container()
    app.state.container = container
    await startup(container)
    yield
    await shutdown_container(container)


app = FastAPI(title="ChainGate", version=VERSION, lifespan=lifespan)

register_error_handlers(app)


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    tb = traceback.format_exception(type(exc), exc, exc.__traceback__)
    logger.error("Unhandled error on %s %s:\n%s", request.method, request.url.path, "".join(tb))
    return JSONResponse(status_code=500, content=error_body(type(exc).__name__, str(exc)))


app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth_router)
app.include_router(users_router)
app.include_router(chains_router)
app.include_router(transactions_router)


@app.get("/api/v1/health")
async def health():
    return {"status": "ok", "version": VERSION}
