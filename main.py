# main.py
import logging
import routes
from contextlib import asynccontextmanager
from util.enums import Environment, Color, ErrorMessage
from fastapi import FastAPI, Request
from starlette.exceptions import HTTPException as StarletteHTTPException
from config.settings import settings
from config.cache import RedisStore
from fastapi.responses import JSONResponse
from repository.queue_repository import QueueRepository
from service.backup_service import BackupService
from util.constants import InternalURIs
from util.errors import MalformedPayloadError, StoreUnavailableError
from util.logger import init_logger
from util.retry import RetryPolicy

logger = logging.getLogger(__name__)


def _error(http_status: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=http_status,
        content={"error": {"status": http_status, "message": message}, "data": None},
    )


@asynccontextmanager
async def lifespan(fastApi: FastAPI):
    """
    Workers register their snapshot sources on app.state.backups; until then
    the periodic loop and the final backup have nothing to write.
    """
    init_logger()
    print(f"{Color.GREEN}Initializing...{Color.RESET}")
    queue = QueueRepository(RedisStore(settings.REDIS_URL), RetryPolicy.from_settings())
    backups = BackupService(queue, settings.BACKUP_INTERVAL_SECONDS)
    try:
        await queue.launch()
        fastApi.state.queue = queue
        fastApi.state.backups = backups
        fastApi.state.restored = await backups.restore()
        backups.start()
        print(f"{Color.BLUE}Server Started{Color.RESET}")
    except Exception as e:
        print("Failed to connect to Redis:", e)
        await queue.shutdown()
        raise

    try:
        yield
    finally:
        try:
            await backups.stop()
        except Exception:
            logger.exception("backup.final.error")
        try:
            await queue.shutdown()
        except Exception as e:
            print("Error closing Redis:", e)

        print(f"{Color.RED}Server Shutdown{Color.RESET}")


app: FastAPI = FastAPI(lifespan=lifespan)


@app.middleware("http")
async def require_authorization(request: Request, call_next):
    if request.headers.get("Authorization") != settings.AUTHORIZATION:
        info = ErrorMessage.UNAUTHORIZED.value
        return _error(info.http_status, info.message)
    return await call_next(request)


@app.get(InternalURIs.HEALTH)
async def healthz():
    return {"ok": True}


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == 404:
        return _error(404, ErrorMessage.ROUTE_NOT_FOUND.value.message)
    return _error(exc.status_code, str(exc.detail))


@app.exception_handler(StoreUnavailableError)
async def store_unavailable_handler(request: Request, exc: StoreUnavailableError):
    logger.error("http.store_unavailable path=%s err=%s", request.url.path, exc)
    info = ErrorMessage.STORE_UNAVAILABLE.value
    return _error(info.http_status, info.message)


@app.exception_handler(MalformedPayloadError)
async def malformed_payload_handler(request: Request, exc: MalformedPayloadError):
    logger.error("http.malformed_payload path=%s key=%s", request.url.path, exc.key)
    info = ErrorMessage.MALFORMED_PAYLOAD.value
    return _error(info.http_status, info.message)


routes.register_routes(app)

if __name__ == "__main__":
    import uvicorn

    reload = settings.APP_ENV == Environment.DEV
    uvicorn.run("main:app", host=settings.HOST, port=settings.PORT, reload=reload)
