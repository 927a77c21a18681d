"""excel2json — Compile spreadsheet config tables into typed schemas and JSON data."""

__version__ = "0.2.0"

FILE_NAME_LABEL = "文件名："
CLASS_NAME_LABEL = "类名："

HEADER_ROW_COUNT = 6
"""Rows consumed by the file/class markers and the four header rows."""

DEFAULT_ARRAY_DELIMITER = ","
