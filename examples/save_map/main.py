#!/usr/bin/env python3
# Save a static map of each place given on the command line, e.g.
#     ./main.py "Prague" "Brno" "49.8175,15.4730"
# Maps are written to OUTPUT_DIRECTORY as <place>.png

import logging
import os
import sys

import gmaps_image

OUTPUT_DIRECTORY = "output/maps/"

ZOOM = 12

SIZE = "640x480"

def save_place(place):
    """ Save a map centered on a place, with a marker on it

    Args:
        place: An address or a "latitude,longitude" string.

    Returns:
        The path of the saved image.
    """

    path = os.path.join(OUTPUT_DIRECTORY,
                        "%s.png" % place.replace(" ", "_").replace(",", "_"))
    builder = (gmaps_image.staticmaps.StaticMapImage(place)
               .set_zoom(ZOOM)
               .set_size(SIZE)
               .set_marker("color:red|%s" % place))
    print("Fetching %s" % builder.get_url())
    builder.save(path)
    return path

if (__name__ == "__main__"):
    logging.basicConfig(level = logging.INFO)

    if (len(sys.argv) < 2):
        print("Usage: %s PLACE [PLACE ...]" % sys.argv[0])
        sys.exit(1)

    if (not os.path.isdir(OUTPUT_DIRECTORY)):
        os.makedirs(OUTPUT_DIRECTORY)

    for place in sys.argv[1:]:
        try:
            print("Saved %s" % save_place(place))
        except gmaps_image.errors.MapImageError as err:
            print("Error: %s: %s" % (place, err))
