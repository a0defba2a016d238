"""
Reversible execution engine packages.

Split into the reversible instruction core, the domain gate interpreter,
runtime recording/schemas and observability helpers.
"""
