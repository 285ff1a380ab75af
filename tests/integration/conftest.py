"""Fixtures for integration tests against a real Chromium."""

from collections.abc import AsyncIterator

import pytest
import pytest_asyncio
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Page, async_playwright

BASE_URL = "http://pagebridge.test"

INDEX_HTML = """<!doctype html>
<html><body>
<div id="spinner">loading</div>
<script>
function call(path) {
    const xhr = new XMLHttpRequest();
    xhr.open('GET', path);
    xhr.send();
}
</script>
</body></html>"""


@pytest.fixture
def api_bodies() -> dict[str, list[tuple[int, str]]]:
    """API path to the (status, body) answers served in order."""
    return {}


@pytest_asyncio.fixture
async def page(api_bodies: dict[str, list[tuple[int, str]]]) -> AsyncIterator[Page]:
    """A page whose requests to BASE_URL are fulfilled offline."""
    async with async_playwright() as pw:
        try:
            browser = await pw.chromium.launch(headless=True)
        except PlaywrightError as e:
            pytest.skip(f"Chromium is not available: {e}")
        page = await browser.new_page()

        async def fulfill(route):
            path = route.request.url[len(BASE_URL):]
            if path.startswith("/api/"):
                status, body = api_bodies[path].pop(0)
                await route.fulfill(status=status, body=body, content_type="application/json")
            else:
                await route.fulfill(status=200, body=INDEX_HTML, content_type="text/html")

        await page.route(f"{BASE_URL}/**", fulfill)
        try:
            yield page
        finally:
            await browser.close()
