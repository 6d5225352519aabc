"""

    restr.exc -- exceptions
    =======================

"""

from webob import exc

__all__ = (
    'NoMatchFound', 'NoURLPatternMatched', 'MethodNotAllowed',
    'RouteConfigurationError', 'InvalidRoutePattern',
    'RouteReversalError', 'UnknownFormat', 'UnknownFormatError')

class NoMatchFound(Exception):
    """ Raised when request wasn't matched against any route

    :attr response:
        :class:`webob.Response` object to return to client
    """

    response = NotImplemented

class NoURLPatternMatched(NoMatchFound):
    """ Raised when request wasn't matched against any URL pattern"""

    response = exc.HTTPNotFound()

class MethodNotAllowed(NoMatchFound):
    """ Raised when request was matched but request method isn't allowed

    :attr allowed:
        methods registered for the matched path
    """

    def __init__(self, allowed=()):
        super(MethodNotAllowed, self).__init__(
            'allowed methods: %s' % ', '.join(allowed))
        self.allowed = list(allowed)
        self.response = exc.HTTPMethodNotAllowed(
            headers=[('Allow', ', '.join(self.allowed))])

class RouteConfigurationError(Exception):
    """ Routes were configured improperly

    Errors of such type can be only raised during initial configuration and not
    during runtime.
    """

class InvalidRoutePattern(RouteConfigurationError):
    """ Route configured with invalid route pattern"""

class RouteReversalError(Exception):
    """ Cannot reverse route"""

class UnknownFormat(Exception):
    """ Raised when the format resolved from a request has no handler

    :attr format:
        format resolved from the request, ``None`` if negotiation gave no
        answer in strict mode
    :attr defined_formats:
        formats which had handlers registered
    """

    response = exc.HTTPNotAcceptable()

    def __init__(self, format, defined_formats):
        self.format = format
        self.defined_formats = list(defined_formats)
        super(UnknownFormat, self).__init__(
            "Format '%s' is not supported. Defined formats: %s" % (
                format, ', '.join(self.defined_formats)))

UnknownFormatError = UnknownFormat
