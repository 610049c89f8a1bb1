"""Application package for the education administration backend.

This package exposes the service, repository and model modules used by
the FastAPI application: a catalogue of programs, courses, activities and
tests (with ordered stages and questions) plus participant enrollment.
Individual modules contain the concrete implementations and documentation.
"""
