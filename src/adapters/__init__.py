"""Adapters that implement the core ports for files, HTTP, IPC and logging."""
