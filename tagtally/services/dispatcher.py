import asyncio
from typing import List, Optional, Sequence

from tagtally.core.exceptions import WorkerError
from tagtally.core.logging import setup_logging
from tagtally.schemas.analyse import PostResult
from tagtally.services.worker_client import WorkerClient

logger = setup_logging(__name__)


def _first_error(group: BaseExceptionGroup) -> BaseException:
    for exc in group.exceptions:
        if isinstance(exc, BaseExceptionGroup):
            return _first_error(exc)
        return exc
    return group


class Dispatcher:
    """
    Runs one worker call per batch concurrently and joins them fail-fast.

    All calls are started inside a single TaskGroup; the caller suspends once
    at its exit. When a call fails the group cancels the local coroutines of
    the calls still in flight and the first error is raised. The remote
    invocations themselves are not cancelled.
    """
    def __init__(self, worker: WorkerClient, max_concurrency: Optional[int] = None):
        self.worker = worker
        self.semaphore = asyncio.Semaphore(max_concurrency) if max_concurrency else None

    async def _run_batch(self, index: int, batch: List[str]) -> List[PostResult]:
        try:
            if self.semaphore is None:
                results = await self.worker.extract_tags(batch)
            else:
                async with self.semaphore:
                    results = await self.worker.extract_tags(batch)
        except WorkerError as e:
            e.batch_index = index
            raise
        except Exception as e:
            raise WorkerError(f"Worker call failed: {e}", batch_index=index) from e
        logger.debug(f"Batch {index} returned {len(results)} results")
        return results

    async def dispatch(self, batches: Sequence[List[str]]) -> List[PostResult]:
        if not batches:
            return []

        logger.info(f"Dispatching {len(batches)} batches")
        try:
            async with asyncio.TaskGroup() as group:
                tasks = [group.create_task(self._run_batch(index, batch)) for index, batch in enumerate(batches)]
        except BaseExceptionGroup as eg:
            raise _first_error(eg)

        # tasks are in batch order, independent of completion order
        results: List[PostResult] = []
        for task in tasks:
            results.extend(task.result())
        logger.info(f"Collected {len(results)} post results from {len(batches)} batches")
        return results


async def dispatch(batches: Sequence[List[str]], worker: WorkerClient, max_concurrency: Optional[int] = None) -> List[PostResult]:
    return await Dispatcher(worker, max_concurrency).dispatch(batches)
