"""Standly package.

This package is organized by feature modules (users, standups, tasks, leaves, ...)
with a thin Flask controller layer and service/repository layers.
"""
