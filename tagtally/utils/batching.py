import math
from typing import List, Sequence


def partition(urls: Sequence[str], fanout: int) -> List[List[str]]:
    """Split urls into at most ``fanout`` contiguous batches of ceil(n / fanout) items."""
    if fanout < 1:
        raise ValueError(f"fanout must be at least 1, got {fanout}")
    if not urls:
        return []

    batch_size = math.ceil(len(urls) / fanout)
    return [list(urls[i:i + batch_size]) for i in range(0, len(urls), batch_size)]
