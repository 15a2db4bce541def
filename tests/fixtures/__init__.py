"""Shared testing fixtures for the shared_reexports test suite."""

from .package import PackageBuilder, build_tree  # noqa: F401

__all__ = [
    "PackageBuilder",
    "build_tree",
]
