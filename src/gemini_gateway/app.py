import logging

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, Response
from mangum import Mangum

from gemini_gateway.exceptions import GatewayError
from gemini_gateway.routers import chat
from gemini_gateway.setting import CORS_HEADERS, DESCRIPTION, SUMMARY, TITLE, VERSION

config = {
    "title": TITLE,
    "description": DESCRIPTION,
    "summary": SUMMARY,
    "version": VERSION,
    # The gateway owns every path, including the default docs routes.
    "docs_url": None,
    "redoc_url": None,
    "openapi_url": None,
}

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(**config)


@app.middleware("http")
async def cors_middleware(request: Request, call_next):
    if request.method == "OPTIONS":
        return Response(status_code=200, headers=CORS_HEADERS)

    response = await call_next(request)
    response.headers.update(CORS_HEADERS)
    return response


@app.exception_handler(GatewayError)
async def gateway_exception_handler(request: Request, exc: GatewayError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    else:
        logger.warning("%s %s rejected: %s", request.method, request.url.path, exc.message)
    return JSONResponse(exc.body, status_code=exc.status_code)


@app.exception_handler(Exception)
async def unexpected_exception_handler(request: Request, exc: Exception):
    # Runs outside the CORS middleware, so the headers are set here.
    logger.exception("Unexpected error on %s %s", request.method, request.url.path)
    return JSONResponse({"error": str(exc)}, status_code=500, headers=CORS_HEADERS)


app.include_router(chat.router)

handler = Mangum(app)

if __name__ == "__main__":
    # Bind to 0.0.0.0 for container environments
    uvicorn.run("gemini_gateway.app:app", host="0.0.0.0", port=8000, reload=False)  # nosec B104
