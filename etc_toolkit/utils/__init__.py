"""Shared utilities for the exposure time calculator."""

from .config import Config, get_config

__all__ = ['Config', 'get_config']
