"""
FastAPI Application Package

Contains the FastAPI application, its routes and error handlers, and the
process lifecycle hooks that flush the cache on fatal errors.
"""
