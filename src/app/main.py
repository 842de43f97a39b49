"""Definition of FastAPI based web service."""

import os
from contextlib import asynccontextmanager
from typing import AsyncIterator, Awaitable, Callable

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from starlette.routing import Mount, Route, WebSocketRoute

import constants
import metrics
import version
from app import routers
from client import AsyncLlamaStackClientHolder
from configuration import configuration
from generators.llama_stack_generator import LlamaStackGenerator
from log import get_logger

logger = get_logger(__name__)

logger.info("Initializing app")


service_name = configuration.configuration.name


# running on FastAPI startup
@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    """
    Initialize app resources.

    FastAPI lifespan context: loads configuration in the worker, initializes
    Llama Stack client and assembles chat endpoints with their stores before
    serving requests.
    """
    configuration.load_configuration(os.environ[constants.CONFIG_PATH_ENV_VAR])
    await AsyncLlamaStackClientHolder().load(configuration.llama_stack_configuration)
    generator = LlamaStackGenerator(
        AsyncLlamaStackClientHolder().get_client(),
        default_model=configuration.inference.default_model,
        default_provider=configuration.inference.default_provider,
    )
    registry = configuration.build_endpoint_registry(generator)
    logger.info("Chat endpoints: %s", ", ".join(registry.names()))
    logger.info("App startup complete")

    yield


app = FastAPI(
    title=f"{service_name} service - OpenAPI",
    summary=f"{service_name} service API specification.",
    description=f"{service_name} service API specification.",
    version=version.__version__,
    license_info={
        "name": "Apache 2.0",
        "url": "https://www.apache.org/licenses/LICENSE-2.0.html",
    },
    servers=[
        {"url": "http://localhost:8080/", "description": "Locally running service"}
    ],
    lifespan=lifespan,
)

cors = configuration.service_configuration.cors

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors.allow_origins,
    allow_credentials=cors.allow_credentials,
    allow_methods=cors.allow_methods,
    allow_headers=cors.allow_headers,
)


@app.middleware("")
async def rest_api_metrics(
    request: Request, call_next: Callable[[Request], Awaitable[Response]]
) -> Response:
    """Middleware with REST API counter update logic."""
    path = request.url.path
    logger.debug("Received request for path: %s", path)

    # ignore paths that are not part of the app routes
    if not any(path.startswith(prefix) for prefix in app_routes_prefixes):
        return await call_next(request)

    # measure time to handle duration + update histogram
    with metrics.response_duration_seconds.labels(path).time():
        response = await call_next(request)

    # ignore /metrics endpoint that will be called periodically
    if not path.endswith("/metrics"):
        # just update metrics
        metrics.rest_api_calls_total.labels(path, response.status_code).inc()
    return response


logger.info("Including routers")
routers.include_routers(app)

# chat routes are parametrized by endpoint name, so path prefixes are matched
app_routes_prefixes = [
    route.path.split("{", 1)[0]
    for route in app.routes
    if isinstance(route, (Mount, Route, WebSocketRoute))
]
