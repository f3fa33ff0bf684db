"""
file_parser.py
==============

Turn an uploaded **CSV / Excel** file into a ``pandas.DataFrame``.

* file type from MIME type and extension
* CSV encoding guessed with **chardet**, then a fixed list of fallbacks
* delimiter fallbacks (comma, tab, semicolon, pipe)
* every value read as **string** (``dtype=str``, ``keep_default_na=False``)
* header names NFKC-normalised and folded onto canonical names
  (``sku``, ``name``, ``category``, ``image_url``, ``prefix``, ``aisle``,
  ``slot``, ``level``)
* empty or unsupported files raise ``ValueError``

Accepts a FastAPI ``UploadFile``, a path, or raw bytes, so the same helper
serves the API and the tests.
"""

from __future__ import annotations

import io
import mimetypes
import unicodedata
from pathlib import Path
from typing import Final, Iterable

import chardet
import pandas as pd
from fastapi import UploadFile

ENCODINGS: Final[list[str]] = [
    "utf-8",
    "utf-8-sig",
    "utf-16",
    "cp1252",
    "iso8859-1",
]

# Synonyms seen in spreadsheets kept by operators (English / Portuguese).
HEADER_ALIASES: Final[dict[str, str]] = {
    # --- catalog -----------------------------------------------------------
    "sku": "sku",
    "código": "sku",
    "codigo": "sku",
    "code": "sku",
    "item_code": "sku",
    "name": "name",
    "nome": "name",
    "descrição": "name",
    "descricao": "name",
    "description": "name",
    "category": "category",
    "categoria": "category",
    "image": "image_url",
    "image_url": "image_url",
    "imagem": "image_url",
    # --- locations -----------------------------------------------------------
    "prefix": "prefix",
    "prefixo": "prefix",
    "rua": "prefix",
    "aisle": "aisle",
    "corredor": "aisle",
    "slot": "slot",
    "posição": "slot",
    "posicao": "slot",
    "level": "level",
    "nível": "level",
    "nivel": "level",
}


def read_dataframe(file: UploadFile | str | Path | bytes | bytearray) -> pd.DataFrame:
    """
    Parameters
    ----------
    file :
        * **UploadFile** – API uploads
        * **str / Path** – a file on disk
        * **bytes / bytearray** – in-memory content (parsed as CSV)

    Returns
    -------
    pandas.DataFrame
        first row as header, all values as ``str``

    Raises
    ------
    ValueError
        empty file, unsupported type, or undecodable CSV
    """
    raw, filename = _get_raw_and_name(file)

    if not raw:
        raise ValueError("File is empty")

    mime, _ = mimetypes.guess_type(filename)
    lower_name = filename.lower()

    if lower_name.endswith((".xlsx", ".xls")):
        df = pd.read_excel(io.BytesIO(raw), dtype=str, keep_default_na=False)
    elif mime in ("text/csv", "text/plain", None) or lower_name.endswith(".csv"):
        df = _read_csv(raw)
    else:
        raise ValueError("Unsupported file type (only .csv/.xlsx/.xls accepted)")

    df.columns = (
        df.columns.astype(str)
        .map(lambda s: unicodedata.normalize("NFKC", s))
        .str.replace("\ufeff", "", regex=False)  # BOM
        .str.strip()
    )
    df.rename(
        columns={c: HEADER_ALIASES[c.lower()] for c in df.columns if c.lower() in HEADER_ALIASES},
        inplace=True,
    )

    if df.empty:
        raise ValueError("File has no data rows")
    return df


__all__ = ["read_dataframe", "HEADER_ALIASES"]


# --------------------------------------------------------------------------- #
# helpers (private)                                                           #
# --------------------------------------------------------------------------- #
def _read_csv(raw: bytes) -> pd.DataFrame:
    # many NUL bytes in the first KB -> almost certainly UTF-16
    might_be_utf16 = b"\x00" in raw[:1024]
    enc_guess: str = (chardet.detect(raw[:4096]).get("encoding") or "").lower()
    enc_try_order = (["utf-16"] if might_be_utf16 else []) + [enc_guess] + ENCODINGS

    for enc in _unique(e for e in enc_try_order if e):
        try:
            df = pd.read_csv(io.BytesIO(raw), encoding=enc, dtype=str, keep_default_na=False)
        except (UnicodeDecodeError, LookupError):
            continue
        if df.shape[1] == 1:
            for sep in ("\t", ";", "|"):
                try:
                    alt = pd.read_csv(
                        io.BytesIO(raw), encoding=enc, dtype=str, keep_default_na=False, sep=sep
                    )
                except pd.errors.ParserError:
                    continue
                if alt.shape[1] > 1:
                    df = alt
                    break
        return df
    raise ValueError("Cannot decode CSV – unknown encoding")


def _get_raw_and_name(file: UploadFile | str | Path | bytes | bytearray) -> tuple[bytes, str]:
    if isinstance(file, (bytes, bytearray)):
        return bytes(file), ""
    if isinstance(file, (str, Path)):
        p = Path(file)
        return p.read_bytes(), p.name
    if isinstance(file, UploadFile) or (hasattr(file, "file") and hasattr(file, "filename")):
        return file.file.read(), file.filename or ""
    raise TypeError(
        "file must be UploadFile | str | Path | bytes | bytearray; "
        f"got {type(file)}"
    )


def _unique(seq: Iterable[str]) -> list[str]:
    """De-duplicate while keeping order."""
    seen: set[str] = set()
    out: list[str] = []
    for item in seq:
        if item not in seen:
            seen.add(item)
            out.append(item)
    return out
