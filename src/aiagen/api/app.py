"""
AIA Generator Service - HTTP entry point
Accepts a request form plus uploads and answers with the project archive
"""

import asyncio
import time
from contextlib import asynccontextmanager
from typing import Any

from fastapi import Body, FastAPI, File, Form, Request, UploadFile
from fastapi.responses import JSONResponse, Response
from prometheus_client import CONTENT_TYPE_LATEST
from returns.result import Failure, Success

from .. import __version__
from ..core import UploadedFile, configure_logging, get_logger, get_settings, validate_request
from ..generator import AiaGenerator, GenerationError
from ..monitoring import metrics_collector

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Configure logging and build the generator on startup."""
    settings = get_settings()
    configure_logging(settings)
    app.state.generator = AiaGenerator(settings)
    logger.info("service_ready", workspace_dir=str(settings.workspace_dir))
    yield
    logger.info("service_stopped")


app = FastAPI(
    title="AIA Generator",
    description="Builds block-programming project archives from requirement text",
    version=__version__,
    lifespan=lifespan,
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.time()
    logger.info("request", method=request.method, path=request.url.path)
    response = await call_next(request)
    logger.info(
        "response",
        method=request.method,
        path=request.url.path,
        status=response.status_code,
        duration_ms=int((time.time() - start) * 1000),
    )
    return response


def _generator(request: Request) -> AiaGenerator:
    generator = getattr(request.app.state, "generator", None)
    if generator is None:
        generator = AiaGenerator(get_settings())
        request.app.state.generator = generator
    return generator


def _as_upload(upload: UploadFile) -> UploadedFile:
    return UploadedFile(filename=upload.filename or "", stream=upload.file)


@app.get("/health")
async def health():
    """Health check endpoint"""
    return {"status": "ok", "version": __version__}


@app.get("/metrics")
async def metrics():
    return Response(content=metrics_collector.export(), media_type=CONTENT_TYPE_LATEST)


@app.post("/api/validate")
async def validate(request: Request, payload: dict[str, Any] = Body(...)):
    """Validate a configuration and report which features the requirements ask for."""
    match validate_request(payload):
        case Failure(result):
            logger.warning("validation_error", fields=list(result.fields))
            return JSONResponse(
                status_code=400,
                content={"valid": False, "message": "Invalid configuration", "errors": result.errors},
            )
        case Success(validated):
            plan = _generator(request).plan(validated)
            return {
                "valid": True,
                "message": "Configuration is valid",
                "detectedFeatures": plan.detected_features(),
            }


@app.post("/api/generate-aia")
async def generate_aia(
    request: Request,
    project_name: str = Form("", alias="projectName"),
    user_id: str = Form("", alias="userId"),
    api_key: str = Form("", alias="apiKey"),
    cse_id: str = Form("", alias="cseId"),
    search_prompt: str = Form("", alias="searchPrompt"),
    requirements: str = Form(""),
    save_config: str = Form("false", alias="saveConfig"),
    validate_strict: str = Form("true", alias="validateStrict"),
    extensions: list[UploadFile] | None = File(None),
    design_images: list[UploadFile] | None = File(None, alias="designImages"),
):
    """Generate the project archive for download."""
    body = {
        "projectName": project_name,
        "userId": user_id,
        "apiKey": api_key,
        "cseId": cse_id,
        "searchPrompt": search_prompt,
        "requirements": requirements,
        # Multipart booleans arrive as strings
        "saveConfig": save_config == "true",
        "validateStrict": validate_strict == "true",
    }
    uploads = [_as_upload(u) for u in extensions or []]
    images = [_as_upload(u) for u in design_images or []]

    match validate_request(body, uploads, images):
        case Failure(result):
            metrics_collector.record_generation("validation_error", 0.0)
            logger.warning("validation_error", fields=list(result.fields))
            for upload in [*uploads, *images]:
                upload.close()
            return JSONResponse(
                status_code=400,
                content={"message": "Invalid request body", "errors": result.errors},
            )
        case Success(validated):
            pass

    generator = _generator(request)
    loop = asyncio.get_running_loop()
    try:
        archive = await loop.run_in_executor(None, generator.generate, validated)
    except GenerationError as e:
        logger.error("generation_error", error=str(e))
        return JSONResponse(status_code=500, content={"message": "Failed to generate AIA file"})

    return Response(
        content=archive,
        media_type="application/zip",
        headers={"Content-Disposition": f'attachment; filename="{validated.project_name}.aia"'},
    )


def main() -> None:
    """Run the service with uvicorn."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "aiagen.api.app:app",
        host=settings.api_host,
        port=settings.api_port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
