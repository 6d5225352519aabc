"""

    restr.resource -- RESTful resource routing
    ==========================================

    Expands ``resources`` / ``resource`` declarations into the conventional set
    of routes. ``resources('users')`` registers::

        GET    /users           users.index    users
        GET    /users/new       users.new      new_user
        POST   /users           users.create   user
        GET    /users/:id       users.show     user
        GET    /users/:id/edit  users.edit     edit_user
        PATCH  /users/:id       users.update   user
        PUT    /users/:id       users.update   user
        DELETE /users/:id       users.destroy  user

    ``resource('profile')`` registers the same set without ``index`` and
    without the ``:id`` segment.

    Any object with ``get``, ``post``, ``patch``, ``put`` and ``delete``
    registration methods accepting ``(path, to=..., name=...)`` can be used as
    a router; mix :class:`Routing` into it to get the DSL.

"""

import logging

from restr import GET, POST, PUT, DELETE, PATCH, RouteEntry
from restr.utils import join, pluralize, singularize

__all__ = (
    'Routing', 'ResourceBuilder', 'NestedResourceBuilder',
    'NestedResourceContext', 'ActionFilter', 'PLURAL', 'SINGULAR')

logger = logging.getLogger(__name__)

PLURAL = 'plural'
SINGULAR = 'singular'

PLURAL_ACTIONS = ('index', 'new', 'create', 'show', 'edit', 'update',
    'destroy')
SINGULAR_ACTIONS = ('new', 'create', 'show', 'edit', 'update', 'destroy')

# action -> [(method, path suffix, name prefix)]
_action_routes = {
    'index':    [(GET, '', '')],
    'new':      [(GET, '/new', 'new_')],
    'create':   [(POST, '', '')],
    'show':     [(GET, '/:id', '')],
    'edit':     [(GET, '/:id/edit', 'edit_')],
    'update':   [(PATCH, '/:id', ''), (PUT, '/:id', '')],
    'destroy':  [(DELETE, '/:id', '')],
    }

def _option(options, name):
    # ``except`` and ``as`` are keywords, accept both spellings
    value = options.get(name + '_')
    return value if value is not None else options.get(name)

def _names(value):
    if value is None:
        return None
    if isinstance(value, str):
        return [value]
    return [str(v) for v in value]

class ActionFilter(object):
    """ Filters default actions by ``only`` and ``except_`` options

    ``only`` wins over ``except_``; names outside of defaults are ignored.
    """

    @staticmethod
    def filter(defaults, options):
        only = _names(options.get('only'))
        if only is not None:
            return [a for a in defaults if a in only]
        excluded = _names(_option(options, 'except'))
        if excluded is not None:
            return [a for a in defaults if a not in excluded]
        return list(defaults)

class ResourceBuilder(object):
    """ Builds RESTful routes for a resource

    :param router:
        object with ``get``, ``post``, ``patch``, ``put`` and ``delete``
        registration methods
    :param name:
        resource name, plural for :data:`PLURAL` resources
    :param cardinality:
        :data:`PLURAL` or :data:`SINGULAR`
    :param options:
        ``only``, ``except_``, ``controller``, ``path`` and ``as_``
    """

    def __init__(self, router, name, cardinality=PLURAL, **options):
        self.router = router
        self.name = str(name)
        self.cardinality = cardinality
        self.options = options
        self.controller = str(options.get('controller') or self.name)
        self.path = str(options.get('path') or self.name)
        self.route_name = self.determine_route_name()

    @property
    def is_plural(self):
        return self.cardinality == PLURAL

    def determine_route_name(self):
        as_ = _option(self.options, 'as')
        if as_:
            return str(as_)
        return singularize(self.name) if self.is_plural else self.name

    def allowed_actions(self):
        defaults = PLURAL_ACTIONS if self.is_plural else SINGULAR_ACTIONS
        return ActionFilter.filter(defaults, self.options)

    def build_routes(self):
        """ Register routes for allowed actions with the router

        :return:
            list of registered :class:`restr.RouteEntry`
        """
        entries = []
        for action in self.allowed_actions():
            for method, suffix, prefix in _action_routes[action]:
                entry = RouteEntry(
                    method,
                    self.build_route_path(suffix),
                    '%s.%s' % (self.controller, action),
                    self.build_route_name(action, prefix))
                self.register(entry)
                entries.append(entry)
        return entries

    def register(self, entry):
        logger.debug('%-6s %s -> %s (%s)', *entry)
        register = getattr(self.router, entry.method.lower())
        register(entry.path, to=entry.to, name=entry.name)

    def resolve_suffix(self, suffix):
        if not self.is_plural and suffix.startswith('/:id'):
            return suffix[len('/:id'):]
        return suffix

    def base_path(self):
        return join(self.path)

    def build_route_path(self, suffix):
        return self.base_path() + self.resolve_suffix(suffix)

    def base_name(self, action):
        if action == 'index':
            return pluralize(self.route_name)
        return self.route_name

    def build_route_name(self, action, prefix):
        return prefix + self.base_name(action)

class NestedResourceBuilder(ResourceBuilder):
    """ Builds routes for a resource nested inside of ``parent_path``

    Paths become ``/<parent_path>/:<parent>_id/<path>`` and route names are
    prefixed with the singular parent name.
    """

    def __init__(self, router, parent_path, name, cardinality=PLURAL,
            **options):
        super(NestedResourceBuilder, self).__init__(
            router, name, cardinality, **options)
        self.parent_path = str(parent_path).strip('/')
        self.parent_name = singularize(self.parent_path)

    def base_path(self):
        return join(self.parent_path, ':%s_id' % self.parent_name, self.path)

    def base_name(self, action):
        return '%s_%s' % (
            self.parent_name,
            super(NestedResourceBuilder, self).base_name(action))

class NestedResourceContext(object):
    """ Scope for declaring resources nested inside of ``parent_path``

    Can be used as a context manager::

        with routes.resources('posts') as posts:
            posts.resources('comments')

    """

    builder_cls = NestedResourceBuilder

    def __init__(self, router, parent_path):
        self.router = router
        self.parent_path = parent_path

    def resources(self, name, **options):
        return self.build(name, PLURAL, options)

    def resource(self, name, **options):
        return self.build(name, SINGULAR, options)

    def build(self, name, cardinality, options):
        builder = self.builder_cls(
            self.router, self.parent_path, name, cardinality, **options)
        return builder.build_routes()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        return False

    def __repr__(self):
        return '<%s %s>' % (self.__class__.__name__, self.parent_path)

class Routing(object):
    """ Mixin providing ``resources`` and ``resource`` declarations

    Both take an optional ``nested`` callable which is called with a
    :class:`NestedResourceContext` scoped to the declared resource, and both
    return that context so nesting can be done with a ``with`` block too.
    """

    resource_builder_cls = ResourceBuilder
    nested_context_cls = NestedResourceContext

    def resources(self, name, nested=None, **options):
        """ Generate RESTful routes for a plural resource

        :param name:
            resource name (plural)
        :param nested:
            optional callable declaring nested resources
        :param options:
            ``only``, ``except_``, ``controller``, ``path``, ``as_``
        """
        return self._declare(name, PLURAL, nested, options)

    def resource(self, name, nested=None, **options):
        """ Generate RESTful routes for a singular resource

        Same as :meth:`resources` but without ``index`` and ``:id`` segments.
        """
        return self._declare(name, SINGULAR, nested, options)

    def _declare(self, name, cardinality, nested, options):
        builder = self.resource_builder_cls(self, name, cardinality, **options)
        builder.build_routes()
        context = self.nested_context_cls(self, builder.path)
        if nested is not None:
            nested(context)
        return context
