"""Build and launch pipeline.

This module sequences bundle extraction, compilation, verification and
launch, and maps stage failures to process exit codes.
"""
