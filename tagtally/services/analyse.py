from typing import Any, Optional

from tagtally.core.config import Settings
from tagtally.core.logging import setup_logging
from tagtally.core.security import SecurityManager, get_security_manager
from tagtally.schemas.analyse import AggregationOptions, AggregateView
from tagtally.services.aggregator import aggregate
from tagtally.services.dispatcher import Dispatcher
from tagtally.services.worker_client import WorkerClient, get_worker_client
from tagtally.utils.batching import partition
from tagtally.utils.validation import validate_payload

logger = setup_logging("AnalysisService")


class AnalysisService:
    def __init__(self, settings: Settings, security: SecurityManager, worker: WorkerClient):
        self.settings = settings
        self.security = security
        self.dispatcher = Dispatcher(worker, settings.MAX_CONCURRENT_DISPATCHES)

    def default_options(self) -> AggregationOptions:
        return AggregationOptions(
            mode=self.settings.DEFAULT_MODE,
            top_n=self.settings.TOP_N,
            track_authors=self.settings.TRACK_AUTHORS,
        )

    async def analyse(self, payload: Any, options: Optional[AggregationOptions] = None) -> AggregateView:
        """
        Run one request through auth, validation, fan-out and aggregation.

        AuthError, FormatError and ContentError are raised before any worker
        call. A WorkerError from any batch aborts the whole request.
        """
        options = options or self.default_options()

        self.security.check_key(payload)
        urls = validate_payload(
            payload,
            strict=self.settings.STRICT_PAYLOAD_SHAPE,
            prefix=self.settings.URL_PREFIX,
        )

        batches = partition(urls, self.settings.FANOUT)
        logger.info(f"Analysing {len(urls)} urls in {len(batches)} batches (mode={options.mode.value})")

        results = await self.dispatcher.dispatch(batches)
        return aggregate(results, options)


def get_analysis_service(settings: Settings, worker: Optional[WorkerClient] = None) -> AnalysisService:
    return AnalysisService(
        settings,
        get_security_manager(settings),
        worker or get_worker_client(settings),
    )
