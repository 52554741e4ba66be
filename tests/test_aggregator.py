import random

from tagtally.schemas.analyse import (
    AggregationMode,
    AggregationOptions,
    CountsAggregate,
    PostResult,
    RankedAggregate,
)
from tagtally.services.aggregator import Aggregator, aggregate
from tagtally.utils.constants import DEFAULT_TOP_N


def post(hashtags=(), creators=()):
    return PostResult(hashtags=list(hashtags), creators=list(creators))


def test_two_post_scenario():
    results = [post(["a"], ["c1"]), post(["a", "b"], ["c2"])]
    view = aggregate(results, AggregationOptions(mode=AggregationMode.ranked))

    assert isinstance(view, RankedAggregate)
    assert {entry.tag: entry.count for entry in view.tags} == {"a": 2, "b": 1}
    assert {entry.creator: entry.count for entry in view.creators} == {"c1": 1, "c2": 1}
    assert view.to_response() == [
        [{"tag": "a", "count": 2}, {"tag": "b", "count": 1}],
        [{"creator": "c1", "count": 1}, {"creator": "c2", "count": 1}],
    ]


def test_top_mode_truncates_to_n():
    results = [post([f"t{i}"]) for i in range(8)] + [post(["t7"]), post(["t7"]), post(["t3"])]
    view = aggregate(results, AggregationOptions(mode=AggregationMode.top, top_n=5))

    assert [entry.tag for entry in view.tags] == ["t7", "t3", "t0", "t1", "t2"]
    assert [entry.count for entry in view.tags] == [3, 2, 1, 1, 1]


def test_ranked_mode_is_unbounded():
    results = [post([f"t{i}"]) for i in range(12)]
    view = aggregate(results, AggregationOptions(mode=AggregationMode.ranked, top_n=5))
    assert len(view.tags) == 12


def test_ties_keep_first_seen_order():
    results = [post(["z", "y"]), post(["x"]), post(["y", "x", "w"])]
    view = aggregate(results, AggregationOptions(mode=AggregationMode.ranked))
    assert [(entry.tag, entry.count) for entry in view.tags] == [("y", 2), ("x", 2), ("z", 1), ("w", 1)]


def test_counts_mode_returns_tag_mapping_only():
    results = [post(["a"], ["c1"]), post(["a", "b"], ["c2"])]
    view = aggregate(results, AggregationOptions(mode=AggregationMode.counts))

    assert isinstance(view, CountsAggregate)
    assert view.to_response() == {"a": 2, "b": 1}


def test_authors_can_be_skipped():
    results = [post(["a"], ["c1"]), post(["b"], ["c1"])]
    view = aggregate(results, AggregationOptions(mode=AggregationMode.top, track_authors=False))
    assert view.creators == []
    assert len(view.tags) == 2


def test_entity_counts_once_per_post():
    aggregator = Aggregator()
    aggregator.aggregate([post(["a", "a", "b"], ["c", "c"]), post(["a"])])
    assert aggregator.hashtag_counts == {"a": 2, "b": 1}
    assert aggregator.creator_counts == {"c": 1}
    assert aggregator.post_count == 2


def test_counts_accumulate_across_posts():
    aggregator = Aggregator()
    aggregator.add(post(["fyp"], ["c1"]))
    assert aggregator.ranked_hashtags() == [("fyp", 1)]

    aggregator.aggregate([post(["fyp", "dance"], ["c1"]), post(["dance", "fyp"], ["c2"])])

    assert aggregator.ranked_hashtags() == [("fyp", 3), ("dance", 2)]
    assert aggregator.ranked_creators() == [("c1", 2), ("c2", 1)]
    assert all(isinstance(count, int) for count in aggregator.hashtag_counts.values())


def test_counts_do_not_depend_on_fold_order():
    rng = random.Random(7)
    tags = [f"t{i}" for i in range(6)]
    results = [post(rng.sample(tags, rng.randint(0, 4)), [f"c{rng.randint(0, 3)}"]) for _ in range(40)]

    forward = Aggregator()
    forward.aggregate(results)
    shuffled = list(results)
    rng.shuffle(shuffled)
    backward = Aggregator()
    backward.aggregate(shuffled)

    assert forward.hashtag_counts == backward.hashtag_counts
    assert forward.creator_counts == backward.creator_counts


def test_total_count_matches_post_tag_pairs_for_disjoint_tags():
    results = [post([f"p{i}-t{j}" for j in range(i % 4)]) for i in range(15)]
    view = aggregate(results, AggregationOptions(mode=AggregationMode.counts))
    assert sum(view.tags.values()) == sum(len(result.hashtags) for result in results)


def test_empty_results():
    view = aggregate([], AggregationOptions())
    assert view.to_response() == [[], []]


def test_default_options_use_configured_top_n():
    results = [post([f"t{i}"]) for i in range(DEFAULT_TOP_N + 3)]
    aggregator = Aggregator()
    aggregator.aggregate(results)

    assert AggregationOptions().top_n == DEFAULT_TOP_N
    assert len(aggregator.get_view(AggregationOptions()).tags) == DEFAULT_TOP_N
    assert len(aggregator.ranked_hashtags(None)) == DEFAULT_TOP_N + 3
