"""
Run orchestration: context, diagnostics, exceptions and the pipeline.
"""
