"""

    restr.router -- route table for resource declarations
    =====================================================

"""

import logging
from collections import namedtuple
from urllib.parse import urlencode

from restr import HTTPMethod, GET, POST, PUT, DELETE, PATCH, RouteEntry
from restr.resource import Routing
from restr.urlpattern import URLPattern
from restr.exc import NoURLPatternMatched, MethodNotAllowed, RouteReversalError

__all__ = ('RouteTable', 'Match', 'url_for', 'path_for')

logger = logging.getLogger(__name__)

class Match(namedtuple('Match', 'entry params')):
    """ Result of route matching

    :attr entry:
        matched :class:`restr.RouteEntry`
    :attr params:
        dict of path params bound by placeholder name
    """

    @property
    def target(self):
        return self.entry.to

class RouteTable(Routing):
    """ Ordered table of routes

    Registration methods mirror HTTP methods, so resource declarations can be
    made directly on a table::

        routes = RouteTable()
        routes.resources('posts', lambda posts: posts.resources('comments'))
        routes.resource('profile', only=['show', 'edit', 'update'])
        routes.get('/', to='home.index', name='root')

    :param url_pattern_cls:
        class used to compile path templates (default to
        :class:`.urlpattern.URLPattern`)
    """

    url_pattern_cls = None

    def __init__(self, url_pattern_cls=None):
        if url_pattern_cls is not None:
            self.url_pattern_cls = url_pattern_cls
        self.entries = []
        self._patterns = {}
        self._index = {}

    def compile_pattern(self, path):
        if path not in self._patterns:
            self._patterns[path] = (self.url_pattern_cls or URLPattern)(path)
        return self._patterns[path]

    def add(self, method, path, to, name=None):
        """ Register route

        :raises restr.exc.InvalidRoutePattern:
            if ``path`` isn't a valid path template
        """
        self.compile_pattern(path)
        entry = RouteEntry(HTTPMethod(method.upper()), path, to, name)
        self.entries.append(entry)
        if name:
            if name in self._index and self._index[name].path != path:
                logger.debug("route name '%s' now points at %s", name, path)
            self._index[name] = entry
        return entry

    def get(self, path, to, name=None):
        return self.add(GET, path, to, name)

    def post(self, path, to, name=None):
        return self.add(POST, path, to, name)

    def put(self, path, to, name=None):
        return self.add(PUT, path, to, name)

    def patch(self, path, to, name=None):
        return self.add(PATCH, path, to, name)

    def delete(self, path, to, name=None):
        return self.add(DELETE, path, to, name)

    def match(self, request):
        """ Match ``request`` against routes in order of registration

        Path params are stored in ``request.urlvars`` as well.

        :rtype:
            :class:`.Match`
        :raises restr.exc.NoURLPatternMatched:
            if no path template matched
        :raises restr.exc.MethodNotAllowed:
            if path matched but request method isn't allowed for it
        """
        path_info = request.path_info
        allowed = []
        for entry in self.entries:
            try:
                params = self._patterns[entry.path].match(path_info)
            except NoURLPatternMatched:
                continue
            if entry.method != request.method:
                if entry.method not in allowed:
                    allowed.append(entry.method)
                continue
            request.urlvars = params
            return Match(entry, params)
        if allowed:
            raise MethodNotAllowed(allowed)
        raise NoURLPatternMatched(path_info)

    __call__ = match

    def reverse(self, name, **params):
        """ Reverse route with ``name``

        Params named by path placeholders are substituted into path, others
        go to query string.

        :raises restr.exc.RouteReversalError:
            if there's no route with ``name`` or params are missing
        """
        if name not in self._index:
            raise RouteReversalError("no route with name '%s'" % name)
        pattern = self._patterns[self._index[name].path]
        url = pattern.reverse(**params)
        query = [(k, v) for k, v in sorted(params.items())
            if k not in pattern.names]
        if query:
            url += '?' + urlencode(query)
        return url

    def __iter__(self):
        return iter(self.entries)

    def __len__(self):
        return len(self.entries)

    def __repr__(self):
        return '<%s with %d routes>' % (self.__class__.__name__, len(self))

def path_for(routes, name, **params):
    """ Path for route ``name`` in ``routes``"""
    return routes.reverse(name, **params)

def url_for(routes, request, name, **params):
    """ Absolute URL for route ``name`` based on ``request``'s application
    URL
    """
    return request.application_url + routes.reverse(name, **params)
