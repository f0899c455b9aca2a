"""Extract package: node selection and text / attribute / table extraction."""

from tablescrape.extract.extractor import (
    Extraction,
    GroupShape,
    decode_groups,
    extract_attribute,
    extract_attributes,
    extract_text,
    extract_texts,
    stride,
)
from tablescrape.extract.selector import NodeSet, select, select_table
from tablescrape.extract.tabular import extract_table, extract_tables

__all__ = [
    "NodeSet",
    "select",
    "select_table",
    "extract_text",
    "extract_texts",
    "extract_attribute",
    "extract_attributes",
    "Extraction",
    "stride",
    "GroupShape",
    "decode_groups",
    "extract_table",
    "extract_tables",
]
