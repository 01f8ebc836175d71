"""
Models

- models.domain: storage-agnostic dataclasses (Moment, Character, Location, ...)
- models.api: pydantic request bodies for the HTTP surface
"""
