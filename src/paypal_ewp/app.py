from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse, Response
from starlette.concurrency import run_in_threadpool
from dotenv import load_dotenv
from .config import load_config
from .crypto.canonical import coerce_value
from .errors import EWPError
from .obs.prom import prometheus_latest
from .pipeline.orchestrator import EWPEncryptor
from .utils.logging import get_logger
import threading

load_dotenv()

app = FastAPI(title="PayPal EWP encryptor")
log = get_logger("app")

_pipeline = None
_pipeline_lock = threading.Lock()


def get_pipeline() -> EWPEncryptor:
    # Credentials are read on first use; a MissingCredential leaves _pipeline unset
    global _pipeline
    with _pipeline_lock:
        if _pipeline is None:
            _pipeline = EWPEncryptor.from_cert_dir(config=load_config())
        return _pipeline


def reset_pipeline():
    global _pipeline
    with _pipeline_lock:
        _pipeline = None


def _coerce_params(body):
    """Accept {"name": value, ...} or [[name, value], ...]; keep order."""
    if isinstance(body, dict):
        items = list(body.items())
    elif isinstance(body, list):
        items = []
        for pair in body:
            if not isinstance(pair, (list, tuple)) or len(pair) != 2:
                raise ValueError("expected [name, value] pairs")
            items.append((pair[0], pair[1]))
    else:
        raise ValueError("expected a JSON object or a list of [name, value] pairs")
    out = []
    for name, value in items:
        if not isinstance(name, str) or not name:
            raise ValueError("parameter names must be non-empty strings")
        if isinstance(value, (dict, list)):
            raise ValueError(f"parameter {name!r} must be a scalar")
        value = coerce_value(value)
        try:
            name.encode("utf-8")
            value.encode("utf-8")
        except UnicodeEncodeError as e:
            raise ValueError(f"parameter {name!r} is not valid UTF-8 text") from e
        out.append((name, value))
    return out


@app.get("/__health")
async def health():
    return {"status": "ok"}


@app.post("/encrypt")
async def encrypt(request: Request):
    try:
        params = _coerce_params(await request.json())
    except ValueError as e:
        return JSONResponse({"error": "bad_request", "detail": str(e)}, status_code=400)
    try:
        pipeline = await run_in_threadpool(get_pipeline)
        envelope = await run_in_threadpool(pipeline.encrypt, params)
    except EWPError as e:
        log.warning("encrypt endpoint failed: %s", e.kind)
        return JSONResponse({"error": e.kind, "stage": e.stage}, status_code=500)
    return PlainTextResponse(envelope)


@app.get("/metrics")
def prometheus_metrics():
    body, content_type = prometheus_latest()
    return Response(body, media_type=content_type)
