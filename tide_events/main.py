import logging
import os

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, RedirectResponse

from tide_events.consts import OPENAPI_TAGS
from tide_events.errors import AdmiraltyApiError
from tide_events.routes import tide_events_router
from tide_events.settings import get_settings

logging.basicConfig(level=get_settings().log_level)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Tidal Events API",
    version="0.1.0alpha",
    description="API to get high and low water events for Admiralty tide stations.",
    root_path=os.getenv("ROOT_PATH", ""),
    openapi_tags=OPENAPI_TAGS,
)


@app.get("/", include_in_schema=False)
def redirect_to_docs():
    # Redirect to docs
    return RedirectResponse(url=app.docs_url)


@app.exception_handler(AdmiraltyApiError)
def admiralty_api_error_handler(request: Request, exc: AdmiraltyApiError):
    logger.error("Upstream error for %s: %s", request.url.path, exc)
    return JSONResponse(status_code=502, content={"detail": str(exc)})


app.include_router(tide_events_router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("tide_events.main:app", host="0.0.0.0", port=8000, reload=True)
