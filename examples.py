# examples.py

import json

from webob import Response
from webob.dec import wsgify

from restr import RouteTable, respond_with
from restr.exc import NoMatchFound, UnknownFormat

class RenderingResponse(Response):
    """ Response with a toy ``render`` standing in for a view layer"""

    def render(self, template, format=None, layout='application', **context):
        if format == 'json':
            body = json.dumps(dict(context, template=template))
        else:
            body = '<%s:%s>%r' % (layout, template, sorted(context))
        self.body = body.encode('utf-8')
        return self

routes = RouteTable()

with routes.resources('posts', except_=['destroy']) as posts:
    posts.resources('comments', only=['index', 'create'])

routes.resource('profile', only=['show', 'update'])
routes.get('/', to='home.index', name='root')

def posts_index(request, response):
    with respond_with(request, response) as format:
        format.html(lambda response: response.render('posts/index', page=1))
        format.json(lambda response: response.render('posts/index', page=1))

actions = {
    'posts.index': posts_index,
}

@wsgify
def application(request):
    try:
        match = routes(request)
        response = RenderingResponse()
        action = actions.get(match.target)
        if action is None:
            response.body = match.target.encode('utf-8')
        else:
            action(request, response)
    except (NoMatchFound, UnknownFormat) as e:
        return e.response
    return response
