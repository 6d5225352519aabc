"""

    restr.utils -- utility code
    ===========================

"""

import inspect

__all__ = (
    'cached_property', 'join', 'pluralize', 'singularize',
    'positional_args', 'inject_args')

class cached_property(object):
    """ Just like ``property`` but computed only once"""

    def __init__(self, func):
        self.func = func
        self.__name__ = func.__name__
        self.__doc__ = func.__doc__

    def __get__(self, obj, cls):
        if obj is None:
            return self
        val = self.func(obj)
        obj.__dict__[self.__name__] = val
        return val

def join(*parts):
    """ Join URL parts with exactly one slash between them

        >>> join('/posts/', '/:post_id/', 'comments')
        '/posts/:post_id/comments'

    """
    parts = [p.strip('/') for p in parts if p and p.strip('/')]
    return '/' + '/'.join(parts)

def pluralize(word):
    """ Append ``s`` unless ``word`` already ends with it

    Naive on purpose: ``person`` becomes ``persons``, ``news`` stays as is.
    """
    return word if word.endswith('s') else word + 's'

def singularize(word):
    """ Strip a single trailing ``s``

    Naive on purpose: ``addresses`` becomes ``addresse``.
    """
    return word[:-1] if word.endswith('s') else word

def positional_args(obj):
    """ Return ordered list of positional args with which ``obj`` can be called

    :param obj:
        can be a plain function (or lambda) or some type object or method or
        simply callable object (with __call__ method defined)
    """
    if isinstance(obj, type):
        obj = obj.__init__
    elif not (inspect.isfunction(obj) or inspect.ismethod(obj)) \
            and hasattr(obj, '__call__'):
        obj = obj.__call__
    args = _positional_args(obj)
    if args[:1] == ['self']:
        args = args[1:]
    return args

def _positional_args(func):
    try:
        sig = inspect.signature(func)
    except (TypeError, ValueError):
        return []
    return [
        p.name for p in sig.parameters.values()
        if p.kind in (p.POSITIONAL_ONLY, p.POSITIONAL_OR_KEYWORD)
        and p.default is p.empty]

def inject_args(obj, args, **injections):
    """ Inject args for given callable ``obj``, ``args`` with ``injections``"""
    args = list(args)
    pos_args = positional_args(obj)
    for k, arg in sorted(injections.items(),
            key=lambda kv: pos_args.index(kv[0])
            if kv[0] in pos_args else len(pos_args)):
        if k in pos_args:
            args.insert(pos_args.index(k), arg)
    return args
