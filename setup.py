#!/usr/bin/env python3

import setuptools

setuptools.setup(
    name = "gmaps_image",
    version = "1.0.0",
    description = "Builds Google Static Maps API requests and fetches, saves "
                  "or serves the resulting map images",
    packages = ["gmaps_image"],
    python_requires = ">=3.7",
    install_requires = ["googlemaps", "Pillow", "requests"],
    extras_require = {"test": ["pytest"]}
)
