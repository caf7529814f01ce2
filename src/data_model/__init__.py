"""Shared data model primitives."""

from src.data_model.base import ClientPayloadModel, StrictBaseModel


__all__ = ["ClientPayloadModel", "StrictBaseModel"]
