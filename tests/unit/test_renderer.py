"""
Unit tests for origin rendering and error page lookup.
"""

import httpx
import pytest

from s3_static_publisher.exceptions import RenderError
from s3_static_publisher.renderer import HttpRenderer, StaticContentLookup


def make_renderer(handler) -> HttpRenderer:
    client = httpx.Client(
        transport=httpx.MockTransport(handler),
        base_url="https://origin.test",
        follow_redirects=False,
    )
    return HttpRenderer("https://origin.test", client=client)


@pytest.mark.unit
class TestHttpRenderer:
    """Test HttpRenderer class."""

    def test_render_page(self):
        """Test status, body and relevant headers are captured."""
        requested = []

        def handler(request):
            requested.append(str(request.url))
            return httpx.Response(
                200,
                content=b"<html>about</html>",
                headers={
                    "content-type": "text/html",
                    "expires": "Wed, 21 Oct 2026 07:28:00 GMT",
                    "set-cookie": "session=1",
                    "cache-control": "no-cache",
                },
            )

        with make_renderer(handler) as renderer:
            response = renderer.render("/about")

        assert requested == ["https://origin.test/about"]
        assert response.status_code == 200
        assert response.body == b"<html>about</html>"
        assert response.headers == {
            "Content-Type": "text/html",
            "Expires": "Wed, 21 Oct 2026 07:28:00 GMT",
        }

    def test_redirects_are_not_followed(self):
        def handler(request):
            if request.url.path == "/old":
                return httpx.Response(301, headers={"Location": "/new"})
            return httpx.Response(200, content=b"<html>new</html>")

        renderer = make_renderer(handler)
        response = renderer.render("/old")

        assert response.status_code == 301
        assert response.header("location") == "/new"
        assert response.body == b""

    def test_not_found_is_returned(self):
        renderer = make_renderer(lambda request: httpx.Response(404, content=b"missing"))

        response = renderer.render("/missing")

        assert response.status_code == 404
        assert response.body == b"missing"

    def test_connection_error_raises_render_error(self):
        def handler(request):
            raise httpx.ConnectError("Connection refused", request=request)

        renderer = make_renderer(handler)

        with pytest.raises(RenderError) as exc_info:
            renderer.render("/about")

        assert "/about" in str(exc_info.value)
        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)


@pytest.mark.unit
class TestStaticContentLookup:
    """Test StaticContentLookup class."""

    def test_error_pages_match_with_or_without_slashes(self):
        lookup = StaticContentLookup(["404", "/errors/500/"])

        assert lookup.is_published_error_page("/404") is True
        assert lookup.is_published_error_page("/404/") is True
        assert lookup.is_published_error_page("https://example.com/errors/500") is True

    def test_other_pages_do_not_match(self):
        lookup = StaticContentLookup(["/404"])

        assert lookup.is_published_error_page("/about") is False
        assert StaticContentLookup().is_published_error_page("/404") is False
