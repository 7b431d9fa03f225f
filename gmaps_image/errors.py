#!/usr/bin/env python3
# Exceptions raised by gmaps_image

class MapImageError(Exception):
    """ Base class of every error raised while building or fetching a map
    image """

class InvalidArgument(MapImageError, ValueError):
    """ A call was made with arguments the builder does not accept, such as
    more than one positional constructor argument or an unknown map type """

class PreconditionError(MapImageError):
    """ A required parameter (the map center) was not set before the request
    was materialized """

class RemoteResponseError(MapImageError):
    """ The server answered with something that is not a supported image """

class DecodeError(MapImageError):
    """ The payload claimed a supported image type but could not be decoded """
