import json

import pytest

from linkshortener.lambdas.redirect_url import app
from linkshortener.services import LinkService


class TestRedirectUrlHandler:
    @pytest.fixture(autouse=True)
    def setup(self, wire, service: LinkService):
        self.loaded = wire(app)
        self.service = service
        self.link = service.create('https://example.com/my-page')

    def test_redirect_302(self, context, make_event):
        response = app.lambda_handler(make_event('GET', '/r/{shortcode}', shortcode=self.link.shortcode), context)

        assert response['statusCode'] == 302
        assert response['headers']['Location'] == 'https://example.com/my-page'
        assert self.service.stats(self.link.shortcode).access_count == 1
        assert self.loaded == ['redirect_url']

    def test_each_redirect_counts(self, context, make_event):
        event = make_event('GET', '/r/{shortcode}', shortcode=self.link.shortcode)
        for _ in range(3):
            assert app.lambda_handler(event, context)['statusCode'] == 302

        assert self.service.link_dao.get(self.link.shortcode).access_count == 3

    def test_unknown_shortcode_404(self, context, make_event):
        response = app.lambda_handler(make_event('GET', '/r/{shortcode}', shortcode='nope00'), context)
        body = json.loads(response['body'])

        assert response['statusCode'] == 404
        assert body['errorCode'] == 'LINK_NOT_FOUND'

    def test_missing_shortcode_400(self, context, make_event):
        response = app.lambda_handler(make_event('GET', '/r/{shortcode}'), context)

        assert response['statusCode'] == 400
        assert json.loads(response['body'])['errorCode'] == 'MISSING_SHORTCODE'
        assert self.loaded == []

    def test_redirect_follows_updates(self, context, make_event):
        event = make_event('GET', '/r/{shortcode}', shortcode=self.link.shortcode)
        app.lambda_handler(event, context)

        self.service.update(self.link.shortcode, 'https://example.org/moved')

        assert app.lambda_handler(event, context)['headers']['Location'] == 'https://example.org/moved'
