"""Bundle text handling.

This module parses flat bundle documents into file records and
writes those records back to disk as individual source files.
"""
