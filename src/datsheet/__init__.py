"""
datsheet: convert a tree of object description files (.dat) to a single
xlsx workbook and back.
"""
__version__ = "1.2.0"
