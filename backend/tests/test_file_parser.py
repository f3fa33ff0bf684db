import io

import pandas as pd
import pytest
from fastapi import UploadFile

from palletwms.utils.file_parser import read_dataframe


def test_csv_bytes_with_portuguese_headers():
    raw = "Código,Nome,Categoria\nOL-900,Óleo de soja,Óleo\n".encode("utf-8")
    df = read_dataframe(raw)
    assert list(df.columns) == ["sku", "name", "category"]
    assert df.iloc[0]["name"] == "Óleo de soja"


def test_semicolon_delimited():
    raw = "sku;descrição\nA-1;Feijão 30kg\n".encode("utf-8")
    df = read_dataframe(raw)
    assert list(df.columns) == ["sku", "name"]
    assert df.iloc[0]["name"] == "Feijão 30kg"


def test_bom_and_whitespace_stripped():
    raw = "\ufeff SKU ,Name\nX,Box\n".encode("utf-8")
    df = read_dataframe(raw)
    assert list(df.columns) == ["sku", "name"]


def test_values_stay_strings():
    df = read_dataframe(b"aisle,slot,level\n1,01,001\n")
    assert df.iloc[0]["slot"] == "01"
    assert df.iloc[0]["level"] == "001"


def test_excel_upload(tmp_path):
    path = tmp_path / "locations.xlsx"
    pd.DataFrame({"Corredor": ["1"], "Posição": ["2"], "Nível": ["3"]}).to_excel(path, index=False)
    df = read_dataframe(path)
    assert list(df.columns) == ["aisle", "slot", "level"]


def test_upload_file_input():
    up = UploadFile(file=io.BytesIO(b"sku,name\nA,B\n"), filename="catalog.csv")
    assert len(read_dataframe(up)) == 1


def test_empty_file():
    with pytest.raises(ValueError, match="empty"):
        read_dataframe(b"")


def test_header_only():
    with pytest.raises(ValueError, match="no data rows"):
        read_dataframe(b"sku,name\n")


def test_unsupported_extension(tmp_path):
    path = tmp_path / "catalog.pdf"
    path.write_bytes(b"%PDF-1.4")
    with pytest.raises(ValueError, match="Unsupported"):
        read_dataframe(path)
