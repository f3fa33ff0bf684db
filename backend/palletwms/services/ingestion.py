"""
Bulk ingestion of catalog entries and slot addresses from CSV / Excel.

Each helper returns the upload summary used by the API::

    {"total_rows": n, "success_rows": n, "error_rows": n,
     "errors": [{"row": 2, "error": "..."}]}

Row numbers are spreadsheet rows (header = row 1).
"""

from __future__ import annotations

import logging
from pathlib import Path

import pandas as pd
from fastapi import UploadFile

from palletwms.core.errors import WarehouseError
from palletwms.models import CatalogEntry, Category, build_slot
from palletwms.services.catalog import CatalogRegistry
from palletwms.services.slots import SlotRegistry
from palletwms.utils.file_parser import read_dataframe

logger = logging.getLogger(__name__)

_CATEGORY_LOOKUP = {c.value.lower(): c for c in Category}
_CATEGORY_LOOKUP.update({c.name.lower(): c for c in Category})


def _ensure_df(src) -> pd.DataFrame:
    """Convert src into a pandas DataFrame if necessary."""
    if isinstance(src, pd.DataFrame):
        return src
    if isinstance(src, (str, Path, UploadFile, bytes, bytearray)):
        return read_dataframe(src)
    raise TypeError(
        "ingest_* helpers accept pandas.DataFrame, path-like, UploadFile or bytes, "
        f"got {type(src)}"
    )


def _require_cols(df: pd.DataFrame, cols: list[str], kind: str) -> None:
    missing = [c for c in cols if c not in df.columns]
    if missing:
        raise ValueError(f"{kind} file is missing column(s): {', '.join(missing)}")


def _cell(row: pd.Series, name: str) -> str:
    val = row.get(name, "")
    if val is None or (isinstance(val, float) and pd.isna(val)):
        return ""
    return str(val).strip()


def _summary(total: int, errors: list[dict]) -> dict:
    return {
        "total_rows": total,
        "success_rows": total - len(errors),
        "error_rows": len(errors),
        "errors": errors,
    }


def parse_category(value: str) -> Category:
    try:
        return _CATEGORY_LOOKUP[value.strip().lower()]
    except KeyError:
        raise ValueError(
            f"unknown category {value!r} (expected one of: {', '.join(c.value for c in Category)})"
        ) from None


def ingest_catalog(src, catalog: CatalogRegistry) -> dict:
    df = _ensure_df(src)
    _require_cols(df, ["sku", "name"], "catalog")

    errors: list[dict] = []
    for i, (_, row) in enumerate(df.iterrows(), start=2):
        sku = _cell(row, "sku")
        name = _cell(row, "name")
        if not sku or not name:
            errors.append({"row": i, "error": "sku and name are required"})
            continue
        try:
            raw_cat = _cell(row, "category")
            category = parse_category(raw_cat) if raw_cat else Category.SACARIA
            catalog.register(
                CatalogEntry(
                    sku=sku,
                    name=name,
                    category=category,
                    image_url=_cell(row, "image_url") or None,
                )
            )
        except (ValueError, WarehouseError) as exc:
            errors.append({"row": i, "sku": sku, "error": str(exc)})

    summary = _summary(len(df), errors)
    logger.info(
        "ingest_catalog: total=%s success=%s errors=%s",
        summary["total_rows"], summary["success_rows"], summary["error_rows"],
    )
    return summary


def ingest_locations(src, slots: SlotRegistry) -> dict:
    """One slot per row; addresses that already exist are skipped silently."""
    df = _ensure_df(src)
    _require_cols(df, ["aisle", "slot", "level"], "locations")

    errors: list[dict] = []
    created = 0
    for i, (_, row) in enumerate(df.iterrows(), start=2):
        try:
            slot = build_slot(
                _cell(row, "prefix").upper(),
                _cell(row, "aisle"),
                int(_cell(row, "slot")),
                int(_cell(row, "level")),
            )
        except ValueError as exc:
            errors.append({"row": i, "error": f"invalid slot/level: {exc}"})
            continue
        if not slot.aisle:
            errors.append({"row": i, "error": "aisle is required"})
            continue
        if slot.id in slots:
            continue
        slots.add(slot)
        created += 1

    summary = _summary(len(df), errors)
    summary["created"] = created
    logger.info(
        "ingest_locations: total=%s created=%s errors=%s",
        summary["total_rows"], created, summary["error_rows"],
    )
    return summary
