"""

    restr.urlpattern -- matching URL against pattern
    ================================================

    Patterns are ``/``-separated segments where a segment starting with a colon
    is a placeholder, e.g. ``/posts/:post_id/comments/:id/edit``.

"""

import re

from restr.utils import cached_property, join
from restr.exc import (
        InvalidRoutePattern, RouteReversalError, NoURLPatternMatched)

__all__ = ('URLPattern',)

class URLPattern(object):

    _param_re = re.compile(r'^:(?P<label>[a-zA-Z_][a-zA-Z0-9_]*)$')

    def __init__(self, pattern):
        if not pattern.startswith('/'):
            raise InvalidRoutePattern(
                "pattern '%s' should start with '/'" % pattern)
        self.pattern = pattern
        self.segments = [s for s in pattern.split('/') if s]
        for segment in self.segments:
            if segment.startswith(':') and not self._param_re.match(segment):
                raise InvalidRoutePattern(
                    "invalid placeholder '%s' in pattern '%s'" % (
                        segment, pattern))

    @cached_property
    def names(self):
        return [s[1:] for s in self.segments if s.startswith(':')]

    @cached_property
    def is_exact(self):
        return not self.names

    @cached_property
    def compiled(self):
        if self.is_exact:
            return None
        compiled = ''
        for segment in self.segments:
            m = self._param_re.match(segment)
            if m:
                compiled += '/(?P<%s>[^/]+)' % m.group('label')
            else:
                compiled += '/' + re.escape(segment)
        return re.compile('^' + (compiled or '/') + '/?$')

    def match(self, path_info):
        """ Match ``path_info`` against pattern

        :return:
            dict of placeholder values
        :raises restr.exc.NoURLPatternMatched:
            if the whole ``path_info`` doesn't match
        """
        if self.is_exact:
            if join(path_info) != join(self.pattern):
                raise NoURLPatternMatched(path_info)
            return {}

        m = self.compiled.match(path_info)
        if not m:
            raise NoURLPatternMatched("no match for '%s' against '%s'" % (
                path_info, self.compiled.pattern))
        return m.groupdict()

    def reverse(self, **params):
        if self.is_exact:
            return self.pattern

        missing = [n for n in self.names if n not in params]
        if missing:
            raise RouteReversalError(
                "not enough params for reversal of '%s' route,"
                ' missing %s' % (self.pattern, ', '.join(missing)))
        return '/' + '/'.join(
            str(params[s[1:]]) if s.startswith(':') else s
            for s in self.segments)

    def __repr__(self):
        return '<%s %s>' % (self.__class__.__name__, self.pattern)
