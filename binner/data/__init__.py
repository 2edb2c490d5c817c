from .reader import ColumnData, list_columns, read_column

__all__ = ["ColumnData", "list_columns", "read_column"]
