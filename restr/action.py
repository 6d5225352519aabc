"""

    restr.action -- responding with multiple formats
    ================================================

    Lets a request handler declare one response handler per format and runs the
    one matching the request::

        def show(request, response):
            with respond_with(request, response) as format:
                format.html(lambda response: response.render(view, page=1))
                format.json(lambda response: response.render(view))

    The format is resolved from, in order: the ``format`` param, the path
    extension (``/articles.xml``) and the ``Accept`` header. Requests resolving
    to a format without a handler raise :class:`restr.exc.UnknownFormat`.

    Handlers get arguments injected by name: ``response``, ``request`` and
    ``format``. For formats other than HTML, ``response.render(...)`` gets
    ``format=<format>`` and ``layout=None`` unless passed explicitly.

"""

import logging
import posixpath
from collections import namedtuple
from contextlib import contextmanager

from restr.utils import cached_property, inject_args
from restr.exc import UnknownFormat

__all__ = (
    'Format', 'HTML', 'JSON', 'XML', 'MD', 'FORMATS',
    'AcceptEntry', 'parse_accept', 'RenderProxy', 'FormatResponder',
    'respond_with')

logger = logging.getLogger(__name__)

class Format(str):
    """ Response format

    Objects of this type represent supported format constants.
    """

    @property
    def content_type(self):
        return _content_types.get(self)

HTML    = Format('html')
JSON    = Format('json')
XML     = Format('xml')
MD      = Format('md')

FORMATS = (HTML, JSON, XML, MD)

_content_types = {
    HTML:   'text/html',
    JSON:   'application/json',
    XML:    'application/xml',
    MD:     'text/markdown',
    }

AcceptEntry = namedtuple('AcceptEntry', 'media_type quality')

def parse_quality(params):
    for param in params:
        param = param.strip()
        if param.startswith('q='):
            try:
                return float(param[2:])
            except ValueError:
                return 1.0
    return 1.0

def parse_accept(header):
    """ Parse ``Accept`` header into a list of :class:`.AcceptEntry`

    Entries are sorted by quality, highest first, keeping header order for
    equal qualities. Missing or malformed ``q`` params mean ``1.0``.
    """
    entries = []
    for item in header.split(','):
        parts = item.strip().split(';')
        media_type = parts[0].strip().lower()
        if media_type:
            entries.append(AcceptEntry(media_type, parse_quality(parts[1:])))
    return sorted(entries, key=lambda e: -e.quality)

class RenderProxy(object):
    """ Wraps response for the duration of a single handler call

    Delegates everything to ``response`` except ``render`` which, for formats
    other than HTML, defaults ``format`` to the resolved format and ``layout``
    to ``None``.
    """

    def __init__(self, response, format):
        self.__dict__['_response'] = response
        self.__dict__['_format'] = format

    def render(self, *args, **kwargs):
        if self._format != HTML:
            kwargs.setdefault('format', self._format)
            kwargs.setdefault('layout', None)
        return self._response.render(*args, **kwargs)

    def __getattr__(self, name):
        return getattr(self._response, name)

    def __setattr__(self, name, value):
        setattr(self._response, name, value)

    def __repr__(self):
        return '<%s %s %r>' % (
            self.__class__.__name__, self._format, self._response)

class FormatResponder(object):
    """ Collects per-format handlers and runs the one for request's format

    :param request:
        :class:`webob.Request` or anything with ``params``, ``path_info`` and
        ``headers``, may be ``None`` in which case HTML is assumed
    :param response:
        response to set ``format`` and ``Content-Type`` on, may be ``None``
    :param strict:
        if ``True``, an ``Accept`` header matching no supported format isn't
        treated as HTML and makes :meth:`validate` fail
    """

    formats = FORMATS

    # Accept negotiation policy, not derived from any RFC
    json_threshold = 0.5
    xml_threshold = 0.5
    xml_margin = 0.1

    render_proxy_cls = RenderProxy

    def __init__(self, request, response, strict=False):
        self.request = request
        self.response = response
        self.strict = strict
        self.defined_formats = []

    def html(self, handler):
        return self.respond(HTML, handler)

    def json(self, handler):
        return self.respond(JSON, handler)

    def xml(self, handler):
        return self.respond(XML, handler)

    def md(self, handler):
        return self.respond(MD, handler)

    def respond(self, format, handler):
        """ Register ``handler`` for ``format`` and run it right away if
        ``format`` is the one resolved from request

        :return:
            ``handler`` so this can be used as a decorator
        """
        if format not in self.formats:
            raise ValueError("unsupported format '%s'" % format)
        format = Format(format)
        if format not in self.defined_formats:
            self.defined_formats.append(format)
        if self.format == format:
            self.dispatch(format, handler)
        return handler

    def dispatch(self, format, handler):
        self.set_response_format(format)
        response = (self.render_proxy_cls(self.response, format)
            if self.response is not None else None)
        args = inject_args(handler, [],
            response=response, request=self.request, format=format)
        return handler(*args)

    def set_response_format(self, format):
        if self.response is None:
            return
        self.response.format = format
        headers = getattr(self.response, 'headers', None)
        if headers is not None and format.content_type:
            headers['Content-Type'] = format.content_type

    def validate(self):
        """ Check that request's format had a handler

        :raises restr.exc.UnknownFormat:
            otherwise
        """
        if self.format in self.defined_formats:
            return
        logger.info("no handler for format '%s', defined: %s",
            self.format, ', '.join(self.defined_formats))
        raise UnknownFormat(self.format, self.defined_formats)

    @cached_property
    def format(self):
        """ Format resolved from request, computed once"""
        if self.request is None:
            return HTML
        for source in ('params', 'path', 'accept'):
            format = getattr(self, 'format_from_%s' % source)()
            if format is not None:
                logger.debug("resolved format '%s' from %s", format, source)
                return format
        if self.strict:
            return None
        return HTML

    def format_from_params(self):
        for attr in ('urlvars', 'params'):
            params = getattr(self.request, attr, None)
            value = params.get('format') if params else None
            if value is not None and str(value) in self.formats:
                return Format(value)
        return None

    def format_from_path(self):
        path_info = getattr(self.request, 'path_info', None)
        if not path_info:
            return None
        ext = posixpath.splitext(path_info)[1][1:]
        if ext in self.formats:
            return Format(ext)
        return None

    def format_from_accept(self):
        headers = getattr(self.request, 'headers', None)
        header = headers.get('Accept') if headers is not None else None
        if not header:
            return None
        return self.negotiate(parse_accept(header))

    def negotiate(self, entries):
        """ Pick format from parsed ``Accept`` entries

        JSON wins if acceptable at all. When both HTML and XML are accepted,
        XML needs to be preferred by more than ``xml_margin``.
        """
        def find(*media_types):
            for entry in entries:
                if entry.media_type in media_types:
                    return entry
            return None

        json_entry = find('application/json')
        if json_entry and json_entry.quality > self.json_threshold:
            return JSON

        html_entry = find('text/html')
        xml_entry = find('application/xml', 'text/xml')
        if html_entry and xml_entry:
            if xml_entry.quality > html_entry.quality + self.xml_margin:
                return XML
            return HTML
        if html_entry:
            return HTML
        if xml_entry and xml_entry.quality > self.xml_threshold:
            return XML
        return None

@contextmanager
def respond_with(request, response, strict=False, responder_cls=None):
    """ Open a format responder session

    Yields :class:`.FormatResponder` to register handlers on, validates
    that request's format was handled on exit. Exceptions raised by handlers
    propagate unchanged.
    """
    responder = (responder_cls or FormatResponder)(
        request, response, strict=strict)
    yield responder
    responder.validate()
