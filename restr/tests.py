"""

    restr.tests -- test suite
    =========================

"""

import json
from unittest import TestCase
from webob import Request, Response

from restr import RouteTable, Routing, RouteEntry, respond_with
from restr import GET, PATCH, PUT
from restr.action import (
    FormatResponder, RenderProxy, parse_accept, AcceptEntry,
    HTML, JSON, XML, MD)
from restr.resource import ActionFilter, ResourceBuilder, SINGULAR
from restr.router import url_for, path_for
from restr.urlpattern import URLPattern
from restr.utils import (
    pluralize, singularize, join, positional_args, inject_args)
from restr.exc import (
    NoURLPatternMatched, MethodNotAllowed, RouteReversalError,
    InvalidRoutePattern, UnknownFormat, UnknownFormatError)

__all__ = ()

class RecordingRouter(Routing):

    def __init__(self):
        self.calls = []

    def record(self, method, path, to, name):
        self.calls.append((method, path, to, name))

    def get(self, path, to, name):
        self.record('GET', path, to, name)

    def post(self, path, to, name):
        self.record('POST', path, to, name)

    def patch(self, path, to, name):
        self.record('PATCH', path, to, name)

    def put(self, path, to, name):
        self.record('PUT', path, to, name)

    def delete(self, path, to, name):
        self.record('DELETE', path, to, name)

class FakeResponse(object):

    def __init__(self):
        self.headers = {}
        self.rendered = []

    def render(self, *args, **kwargs):
        self.rendered.append((args, kwargs))
        return 'rendered'

class TestInflector(TestCase):

    def test_pluralize(self):
        self.assertEqual(pluralize('book'), 'books')
        self.assertEqual(pluralize('books'), 'books')
        self.assertEqual(pluralize(pluralize('post')), 'posts')

    def test_singularize(self):
        self.assertEqual(singularize('books'), 'book')
        self.assertEqual(singularize('book'), 'book')
        self.assertEqual(singularize(''), '')

    def test_round_trip(self):
        for word in ('comment', 'user', 'post'):
            self.assertEqual(pluralize(singularize(word)), word + 's')
            self.assertEqual(singularize(pluralize(word)), word)

class TestJoin(TestCase):

    def test_join(self):
        self.assertEqual(join('posts'), '/posts')
        self.assertEqual(join('/posts/', '/:post_id/', 'comments'),
            '/posts/:post_id/comments')
        self.assertEqual(join(''), '/')

class TestActionFilter(TestCase):

    defaults = ('index', 'new', 'create', 'show', 'edit', 'update',
        'destroy')

    def test_no_options(self):
        self.assertEqual(
            ActionFilter.filter(self.defaults, {}), list(self.defaults))

    def test_only(self):
        self.assertEqual(
            ActionFilter.filter(self.defaults, {'only': ['show', 'index']}),
            ['index', 'show'])
        self.assertEqual(
            ActionFilter.filter(self.defaults, {'only': 'show'}),
            ['show'])

    def test_except(self):
        self.assertEqual(
            ActionFilter.filter(self.defaults,
                {'except_': ['new', 'edit', 'destroy']}),
            ['index', 'create', 'show', 'update'])
        self.assertEqual(
            ActionFilter.filter(self.defaults, {'except': ['index']}),
            ['new', 'create', 'show', 'edit', 'update', 'destroy'])

    def test_only_wins_over_except(self):
        self.assertEqual(
            ActionFilter.filter(self.defaults,
                {'only': ['show'], 'except_': ['show']}),
            ['show'])

    def test_unknown_actions(self):
        self.assertEqual(
            ActionFilter.filter(self.defaults, {'only': ['publish']}), [])
        self.assertEqual(
            ActionFilter.filter(('new',), {'only': ['index']}), [])

class TestResources(TestCase):

    def setUp(self):
        self.router = RecordingRouter()

    def test_plural_defaults(self):
        self.router.resources('books')
        self.assertEqual(self.router.calls, [
            ('GET', '/books', 'books.index', 'books'),
            ('GET', '/books/new', 'books.new', 'new_book'),
            ('POST', '/books', 'books.create', 'book'),
            ('GET', '/books/:id', 'books.show', 'book'),
            ('GET', '/books/:id/edit', 'books.edit', 'edit_book'),
            ('PATCH', '/books/:id', 'books.update', 'book'),
            ('PUT', '/books/:id', 'books.update', 'book'),
            ('DELETE', '/books/:id', 'books.destroy', 'book'),
            ])

    def test_singular_defaults(self):
        self.router.resource('profile')
        self.assertEqual(self.router.calls, [
            ('GET', '/profile/new', 'profile.new', 'new_profile'),
            ('POST', '/profile', 'profile.create', 'profile'),
            ('GET', '/profile', 'profile.show', 'profile'),
            ('GET', '/profile/edit', 'profile.edit', 'edit_profile'),
            ('PATCH', '/profile', 'profile.update', 'profile'),
            ('PUT', '/profile', 'profile.update', 'profile'),
            ('DELETE', '/profile', 'profile.destroy', 'profile'),
            ])

    def test_only(self):
        self.router.resources('books', only=['index', 'show'])
        self.assertEqual(self.router.calls, [
            ('GET', '/books', 'books.index', 'books'),
            ('GET', '/books/:id', 'books.show', 'book'),
            ])

    def test_except(self):
        self.router.resource('session', except_=['new', 'edit', 'update'])
        self.assertEqual(self.router.calls, [
            ('POST', '/session', 'session.create', 'session'),
            ('GET', '/session', 'session.show', 'session'),
            ('DELETE', '/session', 'session.destroy', 'session'),
            ])

    def test_only_unknown_action(self):
        self.router.resource('profile', only=['index'])
        self.assertEqual(self.router.calls, [])

    def test_overrides(self):
        self.router.resources('people',
            controller='persons', path='folks', as_='person',
            only=['index', 'edit'])
        self.assertEqual(self.router.calls, [
            ('GET', '/folks', 'persons.index', 'persons'),
            ('GET', '/folks/:id/edit', 'persons.edit', 'edit_person'),
            ])

    def test_as_keyword_spelling(self):
        self.router.resource('account', only=['show'], **{'as': 'me'})
        self.assertEqual(self.router.calls, [
            ('GET', '/account', 'account.show', 'me'),
            ])

    def test_nested(self):
        with self.router.resources('posts', only=[]) as posts:
            posts.resources('comments')
        self.assertEqual(self.router.calls, [
            ('GET', '/posts/:post_id/comments', 'comments.index',
                'post_comments'),
            ('GET', '/posts/:post_id/comments/new', 'comments.new',
                'new_post_comment'),
            ('POST', '/posts/:post_id/comments', 'comments.create',
                'post_comment'),
            ('GET', '/posts/:post_id/comments/:id', 'comments.show',
                'post_comment'),
            ('GET', '/posts/:post_id/comments/:id/edit', 'comments.edit',
                'edit_post_comment'),
            ('PATCH', '/posts/:post_id/comments/:id', 'comments.update',
                'post_comment'),
            ('PUT', '/posts/:post_id/comments/:id', 'comments.update',
                'post_comment'),
            ('DELETE', '/posts/:post_id/comments/:id', 'comments.destroy',
                'post_comment'),
            ])

    def test_nested_callable(self):
        self.router.resources('posts',
            lambda posts: posts.resources('comments', only='index'),
            only=['index'])
        self.assertEqual(self.router.calls, [
            ('GET', '/posts', 'posts.index', 'posts'),
            ('GET', '/posts/:post_id/comments', 'comments.index',
                'post_comments'),
            ])

    def test_nested_singular(self):
        with self.router.resources('posts', only=[]) as posts:
            posts.resource('author', only=['show', 'edit'])
        self.assertEqual(self.router.calls, [
            ('GET', '/posts/:post_id/author', 'author.show', 'post_author'),
            ('GET', '/posts/:post_id/author/edit', 'author.edit',
                'edit_post_author'),
            ])

    def test_nested_uses_parent_path(self):
        with self.router.resources('articles', path='posts', only=[]) as p:
            p.resources('comments', only=['index'])
        self.assertEqual(self.router.calls, [
            ('GET', '/posts/:post_id/comments', 'comments.index',
                'post_comments'),
            ])

    def test_build_routes_returns_entries(self):
        builder = ResourceBuilder(self.router, 'profile', SINGULAR,
            only=['update'])
        self.assertEqual(builder.build_routes(), [
            RouteEntry(PATCH, '/profile', 'profile.update', 'profile'),
            RouteEntry(PUT, '/profile', 'profile.update', 'profile'),
            ])

    def test_route_counts(self):
        self.router.resources('books')
        self.assertEqual(len(self.router.calls), 8)
        self.assertEqual(len(set(c[2] for c in self.router.calls)), 7)
        router = RecordingRouter()
        router.resource('profile')
        self.assertEqual(len(router.calls), 7)
        self.assertEqual(len(set(c[2] for c in router.calls)), 6)

class TestURLPattern(TestCase):

    def test_exact(self):
        p = URLPattern('/books')
        self.assertTrue(p.is_exact)
        self.assertEqual(p.match('/books'), {})
        self.assertEqual(p.match('/books/'), {})
        self.assertRaises(NoURLPatternMatched, p.match, '/books/1')
        self.assertEqual(p.reverse(), '/books')

    def test_params(self):
        p = URLPattern('/posts/:post_id/comments/:id/edit')
        self.assertTrue(not p.is_exact)
        self.assertEqual(p.names, ['post_id', 'id'])
        self.assertEqual(p.match('/posts/3/comments/7/edit'),
            {'post_id': '3', 'id': '7'})
        self.assertRaises(NoURLPatternMatched, p.match, '/posts/3/comments')
        self.assertRaises(NoURLPatternMatched, p.match,
            '/posts/3/comments/7/edit/more')

    def test_reverse(self):
        p = URLPattern('/posts/:post_id/comments/:id')
        self.assertEqual(p.reverse(post_id=1, id=2), '/posts/1/comments/2')
        self.assertRaises(RouteReversalError, p.reverse, post_id=1)

    def test_invalid(self):
        self.assertRaises(InvalidRoutePattern, URLPattern, 'books')
        self.assertRaises(InvalidRoutePattern, URLPattern, '/books/:1d')
        self.assertRaises(InvalidRoutePattern, URLPattern, '/books/:')

class TestRouteTable(TestCase):

    def setUp(self):
        self.routes = RouteTable()
        with self.routes.resources('posts') as posts:
            posts.resources('comments')
        self.routes.resources('books', only=['index', 'show'])
        self.routes.get('/', to='home.index', name='root')

    def test_registration(self):
        self.assertEqual(len(self.routes), 19)
        entry = list(self.routes)[0]
        self.assertEqual(entry,
            RouteEntry(GET, '/posts', 'posts.index', 'posts'))
        self.assertIsInstance(entry.method, str)

    def test_match(self):
        req = Request.blank('/posts/3/comments/7')
        m = self.routes(req)
        self.assertEqual(m.target, 'comments.show')
        self.assertEqual(m.params, {'post_id': '3', 'id': '7'})
        self.assertEqual(req.urlvars, {'post_id': '3', 'id': '7'})

    def test_match_order(self):
        m = self.routes.match(Request.blank('/posts/new'))
        self.assertEqual(m.target, 'posts.new')
        m = self.routes.match(Request.blank('/'))
        self.assertEqual(m.target, 'home.index')

    def test_match_method(self):
        req = Request.blank('/posts/3', {'REQUEST_METHOD': 'PUT'})
        self.assertEqual(self.routes(req).target, 'posts.update')
        req = Request.blank('/posts', {'REQUEST_METHOD': 'POST'})
        self.assertEqual(self.routes(req).target, 'posts.create')

    def test_method_not_allowed(self):
        req = Request.blank('/books/1', {'REQUEST_METHOD': 'DELETE'})
        with self.assertRaises(MethodNotAllowed) as ctx:
            self.routes(req)
        self.assertEqual(ctx.exception.allowed, ['GET'])
        self.assertEqual(ctx.exception.response.status_int, 405)

    def test_no_match(self):
        self.assertRaises(NoURLPatternMatched,
            self.routes, Request.blank('/authors'))

    def test_reverse(self):
        self.assertEqual(self.routes.reverse('book', id=1), '/books/1')
        self.assertEqual(self.routes.reverse('books', page=2),
            '/books?page=2')
        self.assertEqual(self.routes.reverse('post_comments', post_id=4),
            '/posts/4/comments')
        self.assertEqual(
            self.routes.reverse('edit_post_comment', post_id=4, id=2),
            '/posts/4/comments/2/edit')
        self.assertRaises(RouteReversalError, self.routes.reverse, 'authors')
        self.assertRaises(RouteReversalError, self.routes.reverse, 'book')

    def test_path_and_url_for(self):
        self.assertEqual(path_for(self.routes, 'root'), '/')
        req = Request.blank('/')
        self.assertEqual(url_for(self.routes, req, 'book', id=5),
            'http://localhost/books/5')

    def test_invalid_pattern(self):
        self.assertRaises(InvalidRoutePattern,
            self.routes.get, 'books', to='books.index')

class TestParseAccept(TestCase):

    def test_parse(self):
        self.assertEqual(
            parse_accept('text/html;q=0.8, application/json;q=0.9, */*'),
            [AcceptEntry('*/*', 1.0),
             AcceptEntry('application/json', 0.9),
             AcceptEntry('text/html', 0.8)])

    def test_stable_ties(self):
        self.assertEqual(
            [e.media_type for e in parse_accept('text/xml, text/html')],
            ['text/xml', 'text/html'])

    def test_malformed_quality(self):
        self.assertEqual(parse_accept('application/json;q=high'),
            [AcceptEntry('application/json', 1.0)])
        self.assertEqual(parse_accept('text/html; level=1; q='),
            [AcceptEntry('text/html', 1.0)])

class TestFormatResolution(TestCase):

    def resolve(self, url='/', accept=None, strict=False):
        headers = {'Accept': accept} if accept else {}
        req = Request.blank(url, headers=headers)
        return FormatResponder(req, None, strict=strict).format

    def test_no_request(self):
        self.assertEqual(FormatResponder(None, None).format, HTML)

    def test_format_param(self):
        self.assertEqual(
            self.resolve('/articles?format=json', 'application/xml'), JSON)
        self.assertEqual(self.resolve('/articles.xml?format=json'), JSON)

    def test_format_urlvar(self):
        req = Request.blank('/articles')
        req.urlvars = {'format': 'md'}
        self.assertEqual(FormatResponder(req, None).format, MD)

    def test_unsupported_format_param(self):
        self.assertEqual(self.resolve('/articles.xml?format=pdf'), XML)

    def test_path_extension(self):
        self.assertEqual(self.resolve('/articles.xml'), XML)
        self.assertEqual(self.resolve('/articles.md', 'application/json'), MD)
        self.assertEqual(self.resolve('/articles.pdf'), HTML)
        self.assertEqual(self.resolve('/v1.0/articles'), HTML)

    def test_accept_json(self):
        self.assertEqual(
            self.resolve(accept='application/json;q=0.9,text/html;q=0.8'),
            JSON)
        self.assertEqual(
            self.resolve(accept='application/json;q=0.4,text/html;q=0.3'),
            HTML)

    def test_accept_html_xml_tie_break(self):
        self.assertEqual(
            self.resolve(accept='text/html;q=0.9,application/xml;q=0.95'),
            HTML)
        self.assertEqual(
            self.resolve(accept='text/html;q=0.5,application/xml;q=0.95'),
            XML)
        self.assertEqual(
            self.resolve(accept='text/html;q=0.5,text/xml;q=0.95'),
            XML)

    def test_accept_xml_alone(self):
        self.assertEqual(self.resolve(accept='text/xml'), XML)
        self.assertEqual(self.resolve(accept='application/xml;q=0.5'), HTML)
        self.assertEqual(
            self.resolve(accept='application/xml;q=0.5', strict=True), None)

    def test_accept_unresolved(self):
        self.assertEqual(self.resolve(accept='*/*'), HTML)
        self.assertEqual(self.resolve(accept='image/png', strict=True), None)

    def test_resolved_once(self):
        req = Request.blank('/articles.json')
        responder = FormatResponder(req, None)
        self.assertEqual(responder.format, JSON)
        req.path_info = '/articles.xml'
        self.assertEqual(responder.format, JSON)

class TestRespondWith(TestCase):

    def test_dispatch(self):
        req = Request.blank('/articles', headers={'Accept': 'application/json'})
        res = Response()
        called = []
        with respond_with(req, res) as format:
            format.html(lambda: called.append('html'))
            format.json(lambda: called.append('json'))
            format.xml(lambda: called.append('xml'))
        self.assertEqual(called, ['json'])
        self.assertEqual(res.format, 'json')
        self.assertEqual(res.headers['Content-Type'], 'application/json')

    def test_unknown_format(self):
        req = Request.blank('/articles?format=json')
        with self.assertRaises(UnknownFormat) as ctx:
            with respond_with(req, FakeResponse()) as format:
                format.html(lambda: None)
        self.assertEqual(ctx.exception.format, 'json')
        self.assertEqual(ctx.exception.defined_formats, ['html'])
        self.assertEqual(str(ctx.exception),
            "Format 'json' is not supported. Defined formats: html")
        self.assertEqual(ctx.exception.response.status_int, 406)
        self.assertIs(UnknownFormatError, UnknownFormat)

    def test_unknown_format_logged(self):
        req = Request.blank('/articles.md')
        with self.assertLogs('restr.action', 'INFO'):
            with self.assertRaises(UnknownFormat):
                with respond_with(req, None) as format:
                    format.html(lambda: None)

    def test_strict_unresolved(self):
        req = Request.blank('/articles', headers={'Accept': 'image/png'})
        with self.assertRaises(UnknownFormat) as ctx:
            with respond_with(req, None, strict=True) as format:
                format.html(lambda: None)
        self.assertEqual(ctx.exception.format, None)

    def test_injected_args(self):
        req = Request.blank('/articles.md')
        res = FakeResponse()
        seen = []
        def handler(request, format):
            seen.append((request, format))
        with respond_with(req, res) as format:
            format.md(handler)
        self.assertEqual(seen, [(req, MD)])
        self.assertEqual(res.headers, {'Content-Type': 'text/markdown'})

    def test_decorator(self):
        req = Request.blank('/articles.json')
        res = FakeResponse()
        with respond_with(req, res) as format:
            @format.json
            def as_json(response):
                return response.render('articles/index', per_page=20)
        self.assertTrue(callable(as_json))
        self.assertEqual(res.rendered, [(('articles/index',),
            {'per_page': 20, 'format': 'json', 'layout': None})])

    def test_render_html_untouched(self):
        req = Request.blank('/articles')
        res = FakeResponse()
        with respond_with(req, res) as format:
            format.html(lambda response: response.render('index', page=2))
        self.assertEqual(res.rendered, [(('index',), {'page': 2})])

    def test_render_overrides(self):
        req = Request.blank('/articles.xml')
        res = FakeResponse()
        layout = object()
        with respond_with(req, res) as format:
            format.xml(lambda response: response.render(
                'index', format='rss', layout=layout))
        self.assertEqual(res.rendered,
            [(('index',), {'format': 'rss', 'layout': layout})])

    def test_render_restored_after_error(self):
        req = Request.blank('/articles.json')
        res = FakeResponse()
        def failing(response):
            response.render('index')
            raise RuntimeError('boom')
        with self.assertRaises(RuntimeError):
            with respond_with(req, res) as format:
                format.json(failing)
        self.assertNotIn('render', res.__dict__)
        res.render('index')
        self.assertEqual(res.rendered[-1], (('index',), {}))

    def test_missing_response(self):
        req = Request.blank('/articles.json')
        seen = []
        with respond_with(req, None) as format:
            format.json(lambda response: seen.append(response))
        self.assertEqual(seen, [None])

    def test_unsupported_registration(self):
        responder = FormatResponder(Request.blank('/'), None)
        self.assertRaises(ValueError, responder.respond, 'pdf', lambda: None)
        responder.respond('html', lambda: None)
        self.assertEqual(responder.defined_formats, [HTML])

class TestRenderProxy(TestCase):

    def test_delegates(self):
        res = FakeResponse()
        proxy = RenderProxy(res, JSON)
        proxy.status = 201
        self.assertEqual(res.status, 201)
        self.assertIs(proxy.headers, res.headers)
        self.assertEqual(proxy.render('x'), 'rendered')
        self.assertEqual(res.rendered,
            [(('x',), {'format': 'json', 'layout': None})])

class TestPositionalArgs(TestCase):

    def test_func(self):
        def f(a, b, c):
            pass
        self.assertEqual(positional_args(f), ['a', 'b', 'c'])
        def f(a, b, c, d=1):
            pass
        self.assertEqual(positional_args(f), ['a', 'b', 'c'])
        def f(*args, **kw):
            pass
        self.assertEqual(positional_args(f), [])

    def test_lambda(self):
        f = lambda response: None
        self.assertEqual(positional_args(f), ['response'])
        f = lambda: None
        self.assertEqual(positional_args(f), [])

    def test_type(self):
        class f(object):
            def __init__(self, a, b, c):
                pass
        self.assertEqual(positional_args(f), ['a', 'b', 'c'])

    def test___call__(self):
        class f(object):
            def __call__(self, a, b, c):
                pass
        f = f()
        self.assertEqual(positional_args(f), ['a', 'b', 'c'])

    def test_method(self):
        class f(object):
            def method(self, a, b, c):
                pass
        f = f().method
        self.assertEqual(positional_args(f), ['a', 'b', 'c'])

class TestInjectArgs(TestCase):

    def test_simple(self):
        def f(user, a, request):
            pass
        self.assertEqual(
            inject_args(f, ['a'], user='user', request='request'),
            ['user', 'a', 'request'])
        def f(a, request):
            pass
        self.assertEqual(
            inject_args(f, ['a'], user='user', request='request'),
            ['a', 'request'])
        def f(response):
            pass
        self.assertEqual(
            inject_args(f, [], request='request', response='response'),
            ['response'])

class TestExamples(TestCase):

    def setUp(self):
        import examples
        self.app = examples.application

    def test_html(self):
        res = Request.blank('/posts').get_response(self.app)
        self.assertEqual(res.status_int, 200)
        self.assertEqual(res.headers['Content-Type'], 'text/html')
        self.assertEqual(res.body, b"<application:posts/index>['page']")

    def test_json(self):
        req = Request.blank('/posts', headers={'Accept': 'application/json'})
        res = req.get_response(self.app)
        self.assertEqual(res.status_int, 200)
        self.assertEqual(json.loads(res.body.decode('utf-8')),
            {'page': 1, 'template': 'posts/index'})

    def test_not_acceptable(self):
        res = Request.blank('/posts?format=xml').get_response(self.app)
        self.assertEqual(res.status_int, 406)

    def test_nested_route(self):
        res = Request.blank('/posts/1/comments').get_response(self.app)
        self.assertEqual(res.body, b'comments.index')

    def test_errors(self):
        res = Request.blank('/nope').get_response(self.app)
        self.assertEqual(res.status_int, 404)
        req = Request.blank('/posts/1', {'REQUEST_METHOD': 'DELETE'})
        self.assertEqual(req.get_response(self.app).status_int, 405)
