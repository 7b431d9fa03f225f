#!/usr/bin/env python3
# Small library for building Google Static Maps API requests and fetching the
# resulting images

import copy
import logging
from urllib.parse import urlencode

from googlemaps import convert

from . import image_io
from .errors import InvalidArgument, PreconditionError

logger = logging.getLogger(__name__)

## Configuration ###############################################################
# Base URL of the Static Maps API
URL = "https://maps.googleapis.com/maps/api/staticmap"

# Values accepted by the "format" parameter
IMAGE_FORMAT_PNG = "png"
IMAGE_FORMAT_PNG32 = "png32"
IMAGE_FORMAT_GIF = "gif"
IMAGE_FORMAT_JPG = "jpg"
IMAGE_FORMAT_JPG_BASELINE = "jpg-baseline"
IMAGE_FORMATS = (IMAGE_FORMAT_PNG, IMAGE_FORMAT_PNG32, IMAGE_FORMAT_GIF,
                 IMAGE_FORMAT_JPG, IMAGE_FORMAT_JPG_BASELINE)

# Values accepted by the "maptype" parameter
MAP_TYPE_ROADMAP = "roadmap"
MAP_TYPE_SATELLITE = "satellite"
MAP_TYPE_TERRAIN = "terrain"
MAP_TYPE_HYBRID = "hybrid"
MAP_TYPES = (MAP_TYPE_ROADMAP, MAP_TYPE_SATELLITE, MAP_TYPE_TERRAIN,
             MAP_TYPE_HYBRID)

# Default colour of shapes drawn by add_coords
DEFAULT_COLOR = "0x00ff0066"

# Parameter groups, in the order they are serialized. Dictionaries keep
# insertion order, so the keys of each group are also serialized in the order
# they are listed here.
PARAMETER_GROUPS = (
    ("location", {
        # Either a "latitude,longitude" pair or an address. Required.
        "center": None,
        # Magnification level, 0 (whole world) to about 21 (buildings)
        "zoom": 10,
    }),
    ("map", {
        # "{width}x{height}" in pixels
        "size": "500x400",
        "format": IMAGE_FORMAT_PNG,
        "maptype": MAP_TYPE_ROADMAP,
        # Language of the labels, where the tile set supports it
        "language": None,
        # Two-character ccTLD used to pick geo-political borders
        "region": None,
    }),
    ("feature", {
        # One entry per markers= parameter
        "markers": [],
        "path": None,
        "visible": None,
        # One entry per style= parameter
        "style": [],
    }),
    ("reporting", {
        "sensor": False,
    }),
)

def _check_disjoint(groups):
    seen = {}
    for name, parameters in groups:
        for key in parameters:
            if (key in seen):
                raise ValueError("Parameter %s is declared by both the %s "
                                 "and the %s groups"
                                 % (key, seen[key], name))
            seen[key] = name

_check_disjoint(PARAMETER_GROUPS)

def query_pairs(groups):
    """ Flatten parameter groups into an ordered list of (key, value) pairs

    Booleans become "true"/"false", lists become one pair per element so that
    the key repeats in the query string, and None or an empty list drops the
    key altogether.

    Args:
        groups: An iterable of (name, dictionary) tuples.

    Returns:
        A list of (key, string) tuples ready for urlencode.
    """

    pairs = []
    for _name, parameters in groups:
        for key, value in parameters.items():
            if (value is True):
                pairs.append((key, "true"))
            elif (value is False):
                pairs.append((key, "false"))
            elif (isinstance(value, (list, tuple))):
                pairs += [(key, str(item)) for item in value]
            elif (value is None):
                continue
            else:
                pairs.append((key, str(value)))
    return pairs

class StaticMapImage(object):
    """ Builds a single Static Maps API request and fetches its image

    Every setter changes one parameter and returns the instance itself, so
    calls can be chained:

        StaticMapImage("Prague").set_zoom(12).set_marker("Prague").get_url()

    Attributes:
        groups: A list of (name, dictionary) tuples holding this request's
            parameters, copied from PARAMETER_GROUPS.
    """

    def __init__(self, location = None, *args):
        """ Initializes the parameter groups

        Args:
            location: The initial location, or None. See set_location.

        Raises:
            InvalidArgument: More than one positional argument was given.
        """

        if (args):
            raise InvalidArgument("StaticMapImage takes at most one argument, "
                                  "the location; %d were given"
                                  % (len(args) + 1))

        self.reset()
        self.set_location(location)

    def __getitem__(self, key):
        for _name, parameters in self.groups:
            if (key in parameters):
                return parameters[key]
        raise KeyError(key)

    def _set(self, key, value):
        for _name, parameters in self.groups:
            if (key in parameters):
                parameters[key] = value
                return self
        raise KeyError(key)

    def reset(self):
        """ Restore every parameter, including the location, to its default """
        self.groups = [(name, copy.deepcopy(parameters))
                       for name, parameters in PARAMETER_GROUPS]
        return self

    ## Location parameters #####################################################
    def set_location(self, location):
        """ Set the center of the map

        Args:
            location: An address string, a "latitude,longitude" string, a
                (latitude, longitude) pair or a dictionary with "lat" and
                "lng" keys. None clears the location.
        """
        if (location is None):
            return self._set("center", None)
        return self._set("center", convert.latlng(location))

    def set_zoom(self, zoom):
        # int(7.9) truncates; float() lets "7.9" through as well
        return self._set("zoom", int(float(zoom)))

    ## Map parameters ##########################################################
    def set_size(self, size):
        """ Set the image dimensions as a "{width}x{height}" string

        The value is not validated; the API reports malformed sizes itself.
        """
        return self._set("size", size)

    def set_format(self, image_format):
        if (image_format not in IMAGE_FORMATS):
            raise InvalidArgument("Unknown image format %r; expected one of %s"
                                  % (image_format, ", ".join(IMAGE_FORMATS)))
        return self._set("format", image_format)

    def set_map_type(self, map_type):
        if (map_type not in MAP_TYPES):
            raise InvalidArgument("Unknown map type %r; expected one of %s"
                                  % (map_type, ", ".join(MAP_TYPES)))
        return self._set("maptype", map_type)

    def set_language(self, language):
        return self._set("language", language)

    def set_region(self, region):
        return self._set("region", region)

    ## Feature parameters ######################################################
    def set_marker(self, marker):
        """ Add a markers definition, e.g. "color:red|label:A|Prague"

        Each call adds another markers= parameter; earlier markers are kept.
        """
        self["markers"].append(marker)
        return self

    def set_path(self, path):
        return self._set("path", path)

    def set_visible(self, visible):
        return self._set("visible", visible)

    def set_style(self, style):
        """ Add a style rule, e.g. "feature:poi|visibility:off"

        Each call adds another style= parameter; earlier rules are kept.
        """
        self["style"].append(style)
        return self

    def add_coords(self, new_coords, _type = "markers", color = DEFAULT_COLOR):
        """ Draw a list of coordinates on the map

        Builds a markers or path definition from the coordinates and the
        colour. Markers are added alongside any existing markers; a path or
        polygon replaces the current path.

        Args:
            new_coords: A list of (longitude, latitude) pairs.
            _type: A string describing what kind of visual will be drawn.
                Possible options include: markers, path, polygon.
            color: A string containing a 24-bit or 32-bit hex value that
                corresponds to the desired color.

        Raises:
            InvalidArgument: _type is not one of the options above.
        """

        if (_type == "markers"):
            definition = ["color:%s" % color, "size:tiny"]
        elif (_type == "path"):
            definition = ["color:%s" % color, "weight:5"]
        elif (_type == "polygon"):
            definition = ["color:0x00000000", "fillcolor:%s" % color,
                          "weight:5"]
        else:
            raise InvalidArgument("Unknown drawing type %r" % _type)

        for coord in new_coords:
            definition.append(convert.latlng((coord[1], coord[0])))

        if (_type == "markers"):
            return self.set_marker("|".join(definition))
        return self.set_path("|".join(definition))

    ## Reporting parameters ####################################################
    def set_sensor(self, sensor):
        return self._set("sensor", bool(sensor))

    ## Output ##################################################################
    def _require_location(self):
        if (self["center"] is None):
            raise PreconditionError("missing location")

    def build_query_string(self):
        """ Serialize all parameter groups into a query string

        Raises:
            PreconditionError: No location has been set.
        """
        self._require_location()
        return urlencode(query_pairs(self.groups))

    def get_url(self):
        """ Returns the full request URL as a string """
        return "%s?%s" % (URL, self.build_query_string())

    def _fetch(self):
        self._require_location()
        content, mime_type = image_io.fetch(self.get_url())
        return content, image_io.decode(content, mime_type)

    def get_image_bytes(self):
        """ Download the map image

        Returns:
            The raw bytes of the response, which are known to decode as a PNG,
            GIF or JPEG image.

        Raises:
            PreconditionError: No location has been set.
            RemoteResponseError: The response is not a supported image.
            DecodeError: The response could not be decoded.
            requests.RequestException: The request itself failed.
        """
        content, _image = self._fetch()
        return content

    def get_image(self):
        """ Download and decode the map image into a PIL.Image.Image """
        _content, image = self._fetch()
        return image

    def save(self, destination, quality = None, image_format = None):
        """ Download the map image and save it

        Args:
            destination: A path or a writable binary file object.
            quality: 0..100, used by JPEG and PNG output.
            image_format: One of image_io.JPEG, PNG or GIF. If None, the
                format is taken from the file extension.

        Returns:
            True once the image has been written.
        """
        return image_io.save(self.get_image(), destination, quality,
                             image_format)

    def send(self, image_format = image_io.JPEG, quality = None,
             stream = None):
        """ Download the map image and encode it as an HTTP response body

        Args:
            image_format: One of image_io.JPEG, PNG or GIF.
            quality: 0..100, used by JPEG and PNG output.
            stream: An optional writable binary file object that receives the
                body.

        Returns:
            The encoded bytes.
        """
        return image_io.send(self.get_image(), image_format, quality, stream)
