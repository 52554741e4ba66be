import json
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse, PlainTextResponse

from tagtally.core.config import Settings, get_settings
from tagtally.core.exceptions import ClientError, FormatError, WorkerError
from tagtally.core.logging import setup_logging
from tagtally.schemas.analyse import AggregationMode, AggregationOptions
from tagtally.services.analyse import get_analysis_service
from tagtally.services.worker_client import WorkerClient, get_worker_client
from tagtally.utils.constants import AGGREGATION_MODE_HEADER, FAILURE_MESSAGE

router = APIRouter()
logger = setup_logging("AnalyseAPI")


def get_worker(settings: Settings = Depends(get_settings)) -> WorkerClient:
    return get_worker_client(settings)


@router.put("/analyseLikedVids")
async def analyse_liked_vids(
    request: Request,
    mode: Optional[AggregationMode] = Query(None),
    top_n: Optional[int] = Query(None, ge=1),
    track_authors: Optional[bool] = Query(None),
    settings: Settings = Depends(get_settings),
    worker: WorkerClient = Depends(get_worker),
):
    try:
        analysis_service = get_analysis_service(settings, worker)
        options = AggregationOptions(
            mode=mode or settings.DEFAULT_MODE,
            top_n=top_n or settings.TOP_N,
            track_authors=settings.TRACK_AUTHORS if track_authors is None else track_authors,
        )
        try:
            payload = await request.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise FormatError() from e

        view = await analysis_service.analyse(payload, options)
        return JSONResponse(
            content=view.to_response(),
            status_code=200,
            headers={AGGREGATION_MODE_HEADER: options.mode.value},
        )
    except ClientError as e:
        logger.info(f"Rejected request: {type(e).__name__}")
        return PlainTextResponse(e.message, status_code=e.status_code)
    except WorkerError as e:
        logger.error(f"Worker failure on batch {e.batch_index}: {e.detail}")
        return PlainTextResponse(FAILURE_MESSAGE, status_code=500)
    except Exception:
        logger.exception("Unexpected error while analysing request")
        return PlainTextResponse(FAILURE_MESSAGE, status_code=500)
