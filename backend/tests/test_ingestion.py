import pandas as pd
import pytest

from palletwms.models import Category
from palletwms.services.catalog import CatalogRegistry
from palletwms.services.ingestion import ingest_catalog, ingest_locations, parse_category
from palletwms.services.slots import SlotRegistry


def test_ingest_catalog_reports_bad_rows():
    df = pd.DataFrame(
        {
            "sku": ["A-1", "A-2", "A-1", "", "A-3"],
            "name": ["Arroz", "Óleo", "dup", "no sku", "Leite"],
            "category": ["", "oleo", "", "", "Bebida"],
        }
    )
    catalog = CatalogRegistry()
    summary = ingest_catalog(df, catalog)

    assert summary["total_rows"] == 5
    assert summary["success_rows"] == 2
    assert summary["error_rows"] == 3
    assert [e["row"] for e in summary["errors"]] == [4, 5, 6]
    assert catalog.get_by_sku("A-1").category is Category.SACARIA
    assert catalog.get_by_sku("A-2").category is Category.OLEO


def test_ingest_catalog_missing_column():
    with pytest.raises(ValueError, match="name"):
        ingest_catalog(pd.DataFrame({"sku": ["A"]}), CatalogRegistry())


def test_ingest_locations_from_csv_bytes():
    raw = b"prefixo;corredor;posicao;nivel\nr;1;1;1\nR;1;1;1\nR;1;x;2\nR;2;3;1\n"
    slots = SlotRegistry()
    summary = ingest_locations(raw, slots)
    assert summary["created"] == 2
    assert summary["error_rows"] == 1
    assert summary["errors"][0]["row"] == 4
    assert slots.ids() == ["R1.01.001", "R2.03.001"]


@pytest.mark.parametrize("raw,expected", [
    ("Sacaria", Category.SACARIA),
    ("ÓLEO", Category.OLEO),
    ("leite", Category.LEITE),
    ("OLEO", Category.OLEO),
])
def test_parse_category(raw, expected):
    assert parse_category(raw) is expected
