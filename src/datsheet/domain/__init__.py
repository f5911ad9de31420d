from .columns import ColumnSet, cell_ref, column_index, column_letter, split_cell_ref
from .model import Cell, Row, Sheet, Workbook
from .objects import DatObject, Parameter, ParamKind, parse_objects, render_object, render_objects
from .strings import SharedStringPool

__all__ = [
    "Cell", "ColumnSet", "DatObject", "ParamKind", "Parameter", "Row", "SharedStringPool", "Sheet",
    "Workbook", "cell_ref", "column_index", "column_letter", "parse_objects", "render_object",
    "render_objects", "split_cell_ref",
]
