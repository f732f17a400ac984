"""External toolchain stages.

This module wraps the compiler and program runner behind a narrow
protocol and implements the compile, verify, and launch stages.
"""
