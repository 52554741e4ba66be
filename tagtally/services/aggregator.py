from collections import Counter
from typing import Iterable, List, Optional, Tuple

from tagtally.core.logging import setup_logging
from tagtally.schemas.analyse import (
    AggregationMode,
    AggregationOptions,
    AggregateView,
    CountsAggregate,
    CreatorCount,
    PostResult,
    RankedAggregate,
    TagCount,
)

logger = setup_logging(__name__)


class Aggregator:
    """
    Folds per-post worker results into occurrence tables and renders them.

    Each tag (and author, when tracked) counts at most once per post, so a
    count is the number of distinct posts the entity appeared in. Counter
    keeps first-seen order and most_common() sorts stably, so equal counts
    stay in the order they were first seen.
    """
    def __init__(self, track_authors: bool = True):
        self.track_authors = track_authors
        self.hashtag_counts = Counter()
        self.creator_counts = Counter()
        self.post_count = 0

    def add(self, result: PostResult):
        self.hashtag_counts.update(dict.fromkeys(result.hashtags, 1))
        if self.track_authors:
            self.creator_counts.update(dict.fromkeys(result.creators, 1))
        self.post_count += 1

    def aggregate(self, results: Iterable[PostResult]):
        for result in results:
            self.add(result)
        logger.debug(
            f"Aggregated {self.post_count} posts into {len(self.hashtag_counts)} hashtags "
            f"and {len(self.creator_counts)} creators"
        )

    def ranked_hashtags(self, limit: Optional[int] = None) -> List[Tuple[str, int]]:
        return self.hashtag_counts.most_common(limit)

    def ranked_creators(self, limit: Optional[int] = None) -> List[Tuple[str, int]]:
        return self.creator_counts.most_common(limit)

    def get_view(self, options: AggregationOptions) -> AggregateView:
        if options.mode == AggregationMode.counts:
            return CountsAggregate(tags=dict(self.hashtag_counts))

        limit = options.top_n if options.mode == AggregationMode.top else None
        return RankedAggregate(
            tags=[TagCount(tag=tag, count=count) for tag, count in self.ranked_hashtags(limit)],
            creators=[CreatorCount(creator=creator, count=count) for creator, count in self.ranked_creators(limit)],
        )


def aggregate(results: Iterable[PostResult], options: AggregationOptions) -> AggregateView:
    aggregator = Aggregator(track_authors=options.track_authors and options.mode != AggregationMode.counts)
    aggregator.aggregate(results)
    return aggregator.get_view(options)
