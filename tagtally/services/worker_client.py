import json
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, List, Optional

import grpc
import httpx
from pydantic import TypeAdapter, ValidationError

from tagtally.core.config import Settings
from tagtally.core.exceptions import WorkerError
from tagtally.core.logging import setup_logging
from tagtally.schemas.analyse import PostResult, WorkerRequest
from tagtally.utils.constants import HASHTAGS_FIELD, CREATORS_FIELD

logger = setup_logging(__name__)

_post_results_adapter = TypeAdapter(List[PostResult])


def parse_worker_payload(data: Any, batch: List[str], accept_batch_level: bool = False) -> List[PostResult]:
    """
    Turn a decoded worker response into one PostResult per url of the batch.

    The worker answers with a list of {hashtags, creators} objects aligned
    with the batch. A single object for the whole batch is only accepted when
    accept_batch_level is set; it is then folded as one post.
    """
    if isinstance(data, dict) and (HASHTAGS_FIELD in data or CREATORS_FIELD in data):
        if not accept_batch_level:
            raise WorkerError(f"Worker returned batch-level results for {len(batch)} urls")
        logger.warning(f"Worker returned batch-level results for {len(batch)} urls, counting them as one post")
        try:
            return [PostResult.model_validate(data)]
        except ValidationError as e:
            raise WorkerError(f"Malformed worker response: {e}") from e

    if not isinstance(data, list):
        raise WorkerError(f"Unexpected worker response type: {type(data).__name__}")

    try:
        results = _post_results_adapter.validate_python(data)
    except ValidationError as e:
        raise WorkerError(f"Malformed worker response: {e}") from e

    if len(results) != len(batch):
        raise WorkerError(f"Worker returned {len(results)} results for {len(batch)} urls")
    return results


class WorkerClient:
    """Calls the remote tag-extraction worker for one batch of urls."""

    def __init__(self, settings: Settings):
        self.settings = settings
        self.timeout = settings.WORKER_TIMEOUT_SECONDS
        self.accept_batch_level = settings.ACCEPT_BATCH_LEVEL_RESULTS

    async def invoke(self, request: WorkerRequest) -> Any:
        raise NotImplementedError

    async def extract_tags(self, batch: List[str]) -> List[PostResult]:
        data = await self.invoke(WorkerRequest(urls=batch))
        return parse_worker_payload(data, batch, self.accept_batch_level)


class HttpWorkerClient(WorkerClient):
    def __init__(self, settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None):
        super().__init__(settings)
        self.url = settings.WORKER_URL
        self.transport = transport
        self.headers = {}
        if settings.WORKER_FUNCTION_NAME:
            self.headers["X-Function-Name"] = settings.WORKER_FUNCTION_NAME
        if settings.WORKER_INVOCATION_TYPE:
            self.headers["X-Invocation-Type"] = settings.WORKER_INVOCATION_TYPE

    @asynccontextmanager
    async def _get_client(self) -> AsyncGenerator[httpx.AsyncClient, None]:
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport, headers=self.headers) as client:
            yield client

    async def invoke(self, request: WorkerRequest) -> Any:
        if not self.url:
            raise WorkerError("WORKER_URL is not configured")
        async with self._get_client() as client:
            try:
                response = await client.post(self.url, json=request.model_dump())
                response.raise_for_status()
                return response.json()
            except httpx.HTTPError as e:
                logger.error(f"Worker request failed: {e}")
                raise WorkerError(f"Worker request failed: {e}") from e
            except ValueError as e:
                logger.error(f"Worker returned invalid JSON: {e}")
                raise WorkerError(f"Worker returned invalid JSON: {e}") from e


def _serialize(message: dict) -> bytes:
    return json.dumps(message).encode("utf-8")


def _deserialize(payload: bytes) -> Any:
    return json.loads(payload.decode("utf-8"))


class GrpcWorkerClient(WorkerClient):
    """Unary gRPC call carrying JSON bodies, so no generated stubs are needed."""

    def __init__(self, settings: Settings):
        super().__init__(settings)
        self.address = settings.WORKER_GRPC_ADDRESS
        self.method = settings.WORKER_GRPC_METHOD

    @asynccontextmanager
    async def _get_worker_channel(self) -> AsyncGenerator[grpc.aio.Channel, None]:
        channel = None
        try:
            channel = grpc.aio.insecure_channel(self.address)
            yield channel
        finally:
            if channel:
                try:
                    await channel.close()
                except Exception as e:
                    logger.warning(f"Error closing channel: {e}")

    async def invoke(self, request: WorkerRequest) -> Any:
        if not self.address:
            raise WorkerError("WORKER_GRPC_ADDRESS is not configured")
        async with self._get_worker_channel() as channel:
            call = channel.unary_unary(
                self.method,
                request_serializer=_serialize,
                response_deserializer=_deserialize,
            )
            try:
                data = await call(request.model_dump(), timeout=self.timeout)
            except grpc.aio.AioRpcError as e:
                logger.error(f"Worker RPC failed: {e.code()} {e.details()}")
                raise WorkerError(f"Worker RPC failed: {e.code()}") from e
        # grpc logs deserializer failures and hands back None
        if data is None:
            logger.error("Worker response could not be decoded")
            raise WorkerError("Worker response could not be decoded")
        return data


def get_worker_client(settings: Settings) -> WorkerClient:
    if settings.WORKER_TRANSPORT == "grpc":
        return GrpcWorkerClient(settings)
    return HttpWorkerClient(settings)
