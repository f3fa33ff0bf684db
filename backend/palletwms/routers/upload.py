"""
File-upload router.

* POST /v1/upload/catalog    – register catalog entries from CSV / Excel
* POST /v1/upload/locations  – create slot addresses from CSV / Excel

Each accepts one multipart file and answers the ingestion summary
(``total_rows`` / ``success_rows`` / ``error_rows`` / ``errors``).  Rows that
fail are reported; the other rows are still applied.
"""

from __future__ import annotations

import logging
from time import perf_counter
from typing import Annotated

from fastapi import APIRouter, File, HTTPException, UploadFile

from palletwms.deps import StoreDep
from palletwms.services.ingestion import ingest_catalog, ingest_locations
from palletwms.utils.file_parser import read_dataframe

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/upload", tags=["upload"])

UploadDep = Annotated[UploadFile, File(...)]


def _with_samples(summary: dict, df) -> dict:
    summary["sample_errors"] = summary["errors"][:5]
    summary["csv_headers"] = list(df.columns)
    return summary


@router.post("/catalog")
def upload_catalog(file: UploadDep, store: StoreDep) -> dict:
    t0 = perf_counter()
    logger.info("upload_catalog: start filename=%s", file.filename)
    try:
        df = read_dataframe(file)
        with store.lock:
            summary = ingest_catalog(df, store.catalog)
    except ValueError as e:
        logger.warning("catalog upload rejected: %s", e)
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception("catalog upload failed")
        raise HTTPException(status_code=500, detail=f"catalog upload failed: {e}")
    logger.info("upload_catalog: done rows=%s elapsed=%.3fs", len(df), perf_counter() - t0)
    return _with_samples(summary, df)


@router.post("/locations")
def upload_locations(file: UploadDep, store: StoreDep) -> dict:
    t0 = perf_counter()
    logger.info("upload_locations: start filename=%s", file.filename)
    try:
        df = read_dataframe(file)
        with store.lock:
            summary = ingest_locations(df, store.slots)
    except ValueError as e:
        logger.warning("locations upload rejected: %s", e)
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception("locations upload failed")
        raise HTTPException(status_code=500, detail=f"locations upload failed: {e}")
    logger.info("upload_locations: done rows=%s elapsed=%.3fs", len(df), perf_counter() - t0)
    return _with_samples(summary, df)
