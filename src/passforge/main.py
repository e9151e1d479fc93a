from contextlib import asynccontextmanager

from fastapi import APIRouter, FastAPI, Response
from loguru import logger
import uvicorn

from passforge.breach import AiohttpRangeTransport
from passforge.config import config
from passforge.modules.passwords.router import router as passwords_router


@asynccontextmanager
async def lifespan(app_: FastAPI):
    logger.info("Starting passforge API...")
    async with AiohttpRangeTransport() as transport:
        app_.state.breach_transport = transport
        yield
    logger.info("passforge API stopped")


app = FastAPI(title="passforge", lifespan=lifespan)

api_router = APIRouter(prefix="/api")
api_router.include_router(passwords_router)

app.include_router(api_router)


@app.get("/healthz")
async def healthz():
    """
    A tiny, dedicated endpoint that just returns 200 OK and nothing else.
    """
    return Response(status_code=200)


if __name__ == "__main__":
    uvicorn.run(
        "passforge.main:app",
        host=config.api_host,
        port=config.api_port,
        log_config=None,
        log_level=None,
        reload=False,
    )
