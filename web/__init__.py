"""
HTTP interface for the spatial asset register.
"""
