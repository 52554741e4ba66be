import asyncio
import os

os.environ.setdefault("API_KEY", "test-key")
os.environ.setdefault("LOG_TO_FILE", "false")

import pytest

from tagtally.core.config import Settings
from tagtally.core.exceptions import WorkerError
from tagtally.schemas.analyse import PostResult
from tagtally.services.worker_client import WorkerClient

PREFIX = "https://www.tiktokv.com/share/video/"


def video_url(post_id) -> str:
    return f"{PREFIX}{post_id}"


class FakeWorker(WorkerClient):
    """Answers from a url -> (hashtags, creators) table and records every batch it sees."""

    def __init__(self, settings, posts=None, fail_on=None, delays=None):
        super().__init__(settings)
        self.posts = posts or {}
        self.fail_on = set(fail_on or [])
        self.delays = delays or {}
        self.calls = []

    async def extract_tags(self, batch):
        self.calls.append(list(batch))
        delay = max((self.delays.get(url, 0) for url in batch), default=0)
        if delay:
            await asyncio.sleep(delay)
        if self.fail_on.intersection(batch):
            raise WorkerError("simulated worker failure")
        results = []
        for url in batch:
            hashtags, creators = self.posts.get(url, ([], []))
            results.append(PostResult(hashtags=hashtags, creators=creators))
        return results


@pytest.fixture
def settings():
    return Settings(
        API_KEY="test-key",
        WORKER_URL="http://worker.test/invoke",
        WORKER_FUNCTION_NAME="extract-hashtags",
    )


@pytest.fixture
def two_post_worker(settings):
    return FakeWorker(settings, posts={
        video_url(1): (["a"], ["c1"]),
        video_url(2): (["a", "b"], ["c2"]),
    })
