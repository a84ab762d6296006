"""Rewriting of scheduling calls in application sources."""

from transform.rewrite import TransformResult, transform_file, transform_source

__all__ = ["TransformResult", "transform_file", "transform_source"]
