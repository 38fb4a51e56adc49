"""Read models: denormalized, viewer-aware projections composed as single queries."""

from vidtube.readmodel.pagination import Page

__all__ = ["Page"]
