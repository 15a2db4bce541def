"""Generate stable shared re-export stubs for third-party dependencies."""
