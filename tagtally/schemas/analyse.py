from enum import Enum
from typing import List, Dict, Union

from pydantic import BaseModel, Field, ConfigDict

from tagtally.utils.constants import DEFAULT_TOP_N


class AggregationMode(str, Enum):
    top = "top"
    ranked = "ranked"
    counts = "counts"


class PostResult(BaseModel):
    model_config = ConfigDict(extra="ignore")

    hashtags: List[str] = Field(default_factory=list)
    creators: List[str] = Field(default_factory=list)


class WorkerRequest(BaseModel):
    urls: List[str]


class AggregationOptions(BaseModel):
    mode: AggregationMode = AggregationMode.top
    top_n: int = Field(default=DEFAULT_TOP_N, ge=1)
    track_authors: bool = True


class TagCount(BaseModel):
    tag: str
    count: int


class CreatorCount(BaseModel):
    creator: str
    count: int


class RankedAggregate(BaseModel):
    tags: List[TagCount]
    creators: List[CreatorCount]

    def to_response(self) -> list:
        return [
            [entry.model_dump() for entry in self.tags],
            [entry.model_dump() for entry in self.creators],
        ]


class CountsAggregate(BaseModel):
    tags: Dict[str, int]

    def to_response(self) -> dict:
        return dict(self.tags)


AggregateView = Union[RankedAggregate, CountsAggregate]
