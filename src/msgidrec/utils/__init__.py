"""Common utility functions for msgidrec."""

from msgidrec.utils.timestamps import get_iso_timestamp

__all__ = ["get_iso_timestamp"]
