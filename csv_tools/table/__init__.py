"""
The CSVTable data structure and cell coordinates.
"""
