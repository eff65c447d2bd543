"""HugFusion — FastAPI REST API layer.

Modules
-------
main
    FastAPI application with the route handlers, the mounted Gradio UI, and
    the ``main()`` CLI entry point.
models
    Pydantic models for API responses.
"""
