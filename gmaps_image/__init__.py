#!/usr/bin/env python3

__all__ = ["errors", "image_io", "staticmaps"]

from . import errors
from . import image_io
from . import staticmaps
