"""

    restr -- RESTful ergonomics for WebOb based WSGI applications
    =============================================================

    This package provides two things:

    * a DSL to declare RESTful resources (``resources``/``resource``) which
      expands into conventional route tables, nested resources included;

    * a format responder (``respond_with``) which picks one of per-format
      handlers (HTML, JSON, XML, Markdown) based on the request's ``format``
      param, path extension or ``Accept`` header.

"""

from collections import namedtuple

__all__ = (
    'HTTPMethod', 'GET', 'POST', 'PUT', 'DELETE', 'PATCH', 'RouteEntry',
    'Routing', 'RouteTable', 'Match', 'url_for', 'path_for',
    'Format', 'FormatResponder', 'respond_with',
    'NoMatchFound', 'RouteConfigurationError', 'UnknownFormat')

class HTTPMethod(str):
    """ HTTP method

    Objects of this type represent HTTP method constants, a router registers
    routes for them through its lowercased method, e.g. ``router.get(...)``
    for :data:`GET`.
    """

GET     = HTTPMethod('GET')
POST    = HTTPMethod('POST')
PUT     = HTTPMethod('PUT')
DELETE  = HTTPMethod('DELETE')
PATCH   = HTTPMethod('PATCH')

RouteEntry = namedtuple('RouteEntry', 'method path to name')
RouteEntry.__doc__ = """ Route produced by resource declarations

:attr method:
    :class:`HTTPMethod`
:attr path:
    path template, e.g. ``/posts/:post_id/comments``
:attr to:
    handler identifier, ``<controller>.<action>``
:attr name:
    route name
"""

from restr.exc import NoMatchFound, RouteConfigurationError, UnknownFormat
from restr.resource import Routing
from restr.router import RouteTable, Match, url_for, path_for
from restr.action import Format, FormatResponder, respond_with
