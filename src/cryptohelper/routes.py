from __future__ import annotations

import threading
import time

import anyio
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, PlainTextResponse, Response
from starlette.concurrency import run_in_threadpool
from starlette.requests import ClientDisconnect

from .crypto.generator import SigningGenerator
from .errors import GenerationError, TsaError, TsaUpstreamError
from .models import CryptoComponents
from .obs.prom import observe_payloads, observe_tsa_forward, prometheus_latest
from .tsa.forwarder import TIMESTAMP_REPLY_MEDIA_TYPE, TimestampForwarder
from .utils.logging import get_logger

# Both helper endpoints match every method, like a bare net/http handler;
# /get-timestamp rejects non-POST itself so the 405 body stays plain text.
ALL_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS", "TRACE"]
DISCONNECT_POLL_S = 0.05

router = APIRouter()
log = get_logger(__name__)


def get_generator(request: Request) -> SigningGenerator:
    return request.app.state.generator


def get_forwarder(request: Request) -> TimestampForwarder:
    return request.app.state.forwarder


def error_response(message: str, status_code: int, headers: dict | None = None) -> PlainTextResponse:
    return PlainTextResponse(f"[ERROR] {message}\n", status_code=status_code, headers=headers)


async def generate_until_disconnect(request: Request, generator: SigningGenerator) -> CryptoComponents:
    """Run ``generator.generate`` in the threadpool while watching the client.

    A disconnect observed before or during generation sets the cancel event
    the generator checks between steps.
    """
    cancel = threading.Event()
    finished = threading.Event()
    result: dict = {}

    async def watch_disconnect():
        while not finished.is_set():
            if await request.is_disconnected():
                cancel.set()
                return
            await anyio.sleep(DISCONNECT_POLL_S)

    async def run_generator():
        try:
            result["components"] = await run_in_threadpool(generator.generate, cancel)
        except GenerationError as e:
            result["error"] = e
        finally:
            finished.set()

    if await request.is_disconnected():
        cancel.set()
    async with anyio.create_task_group() as tg:
        tg.start_soon(watch_disconnect)
        await run_generator()
        tg.cancel_scope.cancel()

    if "error" in result:
        raise result["error"]
    return result["components"]


@router.get("/__health")
async def health():
    return {"status": "ok"}


@router.get("/metrics")
def prometheus_metrics():
    body, content_type = prometheus_latest()
    return Response(body, media_type=content_type)


@router.api_route("/generate-payloads", methods=ALL_METHODS)
async def generate_payloads(request: Request, generator: SigningGenerator = Depends(get_generator)):
    try:
        components = await generate_until_disconnect(request, generator)
    except GenerationError as e:
        log.error(f"payload generation failed at '{e.step}': {e}")
        observe_payloads("error")
        return error_response(str(e), e.status_code)
    observe_payloads("ok")
    return JSONResponse(components.model_dump(by_alias=True))


@router.api_route("/get-timestamp", methods=ALL_METHODS)
async def get_timestamp(request: Request, forwarder: TimestampForwarder = Depends(get_forwarder)):
    if request.method != "POST":
        return error_response("Method not allowed, must be POST", 405, headers={"Allow": "POST"})

    try:
        signature = await request.body()
    except ClientDisconnect as e:
        log.warning(f"could not read timestamp request body: {e!r}")
        return error_response(f"Error reading request body: {e!r}", 500)

    start = time.time()
    try:
        reply = await run_in_threadpool(forwarder.forward, signature)
    except TsaError as e:
        latency_ms = (time.time() - start) * 1000.0
        code = e.upstream_status if isinstance(e, TsaUpstreamError) else 0
        observe_tsa_forward(result="error", code=code, latency_ms=latency_ms)
        log.warning(str(e))
        return error_response(str(e), e.status_code)
    observe_tsa_forward(result="ok", code=reply.status_code, latency_ms=(time.time() - start) * 1000.0)
    return Response(content=reply.content, media_type=TIMESTAMP_REPLY_MEDIA_TYPE)
