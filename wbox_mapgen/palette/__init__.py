from .color_table import ColorTable, load_color_table, load_default_color_table

__all__ = ["ColorTable", "load_color_table", "load_default_color_table"]
