"""
Shape contracts, line loading, and the file/DataFrame boundary.

Handles turning raw lines into columns and rows, validating table shape,
and reading/writing tables from/to disk and pandas.
"""
