"""Core domain package for the OctoDash companion.

Core contains the config auto-migration and update polling logic without any
file, HTTP, or IPC specific code, keeping the business logic portable.
"""
