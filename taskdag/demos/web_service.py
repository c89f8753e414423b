"""HTTP service that runs a small task graph for every request."""

from __future__ import annotations

import argparse
import json
import logging
import time
from dataclasses import asdict, dataclass

from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import JSONResponse, PlainTextResponse, Response
from starlette.routing import Route

from ..context import Context
from ..errors import GraphError
from ..graph import Task, TaskGraph

logger = logging.getLogger(__name__)

MIN_VALID_LENGTH = 10


@dataclass(frozen=True)
class ApiResponse:
    """Result of processing one request."""

    result: str
    valid: bool
    original_length: int
    validation_status: str
    message: str

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class ProcessDataTask(Task):
    """Upper-case the input and record its length."""

    data: str

    async def run(self, context: Context) -> None:
        print(f"ProcessDataTask: Processing data '{self.data}'")
        processed = f"PROCESSED: {self.data.upper()}"
        async with context.write() as ctx:
            ctx.set("processed_data", processed)
            ctx.set("original_length", len(self.data.encode("utf-8")))
            ctx.set("processing_status", "completed")
        print(f"ProcessDataTask: Stored processed data: {processed}")


@dataclass(frozen=True)
class ValidateTask(Task):
    """Accept the data when it is non-empty and at least ten bytes long."""

    async def run(self, context: Context) -> None:
        print("ValidateTask: Validating processed data")
        async with context.write() as ctx:
            original_length = ctx.get("original_length", int) or 0
            processed_data = ctx.get("processed_data", str) or ""

            is_valid = bool(processed_data) and original_length >= MIN_VALID_LENGTH
            verdict = "valid" if is_valid else "invalid"
            print(
                f"ValidateTask: Data '{processed_data}' "
                f"(original length: {original_length}) is {verdict}"
            )

            ctx.set("is_valid", is_valid)
            ctx.set("validation_status", "passed" if is_valid else "failed")
            ctx.set("validation_timestamp", int(time.time()))


@dataclass(frozen=True)
class ResponseTask(Task):
    """Gather the stored results into an :class:`ApiResponse`."""

    async def run(self, context: Context) -> None:
        print("ResponseTask: Preparing final response")
        async with context.write() as ctx:
            is_valid = ctx.get("is_valid", bool) or False
            response = ApiResponse(
                result=ctx.get("processed_data", str) or "",
                valid=is_valid,
                original_length=ctx.get("original_length", int) or 0,
                validation_status=ctx.get("validation_status", str) or "",
                message=(
                    "Processing completed successfully"
                    if is_valid
                    else "Processing completed but validation failed"
                ),
            )
            ctx.set("final_response", response)
        print(f"ResponseTask: Final response prepared - valid: {is_valid}")


def build_processing_graph(input_data: str) -> TaskGraph:
    """Build ProcessDataTask -> ValidateTask -> ResponseTask for one request."""
    validate_task = ValidateTask()
    graph = TaskGraph()
    graph.add_edge(ProcessDataTask(input_data), validate_task).add_edge(
        validate_task, ResponseTask()
    )
    return graph


async def process_data(request: Request) -> Response:
    """Handle ``POST /process`` with a JSON body ``{"data": "..."}``."""
    try:
        payload = json.loads(await request.body())
    except (json.JSONDecodeError, UnicodeDecodeError):
        return PlainTextResponse("Malformed JSON body", status_code=400)
    if not isinstance(payload, dict) or not isinstance(payload.get("data"), str):
        return PlainTextResponse("Missing or invalid field 'data'", status_code=422)

    data = payload["data"]
    print(f"Received request with data: '{data}'")

    try:
        graph = build_processing_graph(data)
    except GraphError as exc:
        logger.error("Failed to build graph: %s", exc)
        return PlainTextResponse("Internal Server Error", status_code=500)

    try:
        await graph.execute()
    except GraphError as exc:
        logger.error("Graph execution failed: %s", exc)
        return PlainTextResponse("Internal Server Error", status_code=500)

    print("Graph execution completed successfully")
    response = await graph.context().get("final_response", ApiResponse)
    if response is None:
        logger.error("No final response found in context")
        return PlainTextResponse("Internal Server Error", status_code=500)

    print(f"Returning response: {response}")
    return JSONResponse(response.to_dict())


async def health_check(request: Request) -> Response:
    """Handle ``GET /health``."""
    return PlainTextResponse("OK")


def create_app() -> Starlette:
    """Return the application with its two routes."""
    return Starlette(
        routes=[
            Route("/process", process_data, methods=["POST"]),
            Route("/health", health_check, methods=["GET"]),
        ]
    )


def main(argv: list[str] | None = None) -> int:
    """Serve the application over HTTP."""
    import uvicorn

    parser = argparse.ArgumentParser(description="Run the task graph web service.")
    parser.add_argument("--host", default="0.0.0.0", help="address to bind (default: 0.0.0.0)")
    parser.add_argument("--port", type=int, default=3000, help="port to bind (default: 3000)")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO)
    print(f"🚀 Server running on http://{args.host}:{args.port}")
    print(
        f"📝 Try: curl -X POST http://localhost:{args.port}/process "
        "-H 'Content-Type: application/json' -d '{\"data\":\"hello world\"}'"
    )
    print(f"🏥 Health check: curl http://localhost:{args.port}/health")
    uvicorn.run(create_app(), host=args.host, port=args.port)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())