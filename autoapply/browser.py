"""
Playwright-backed page access for the automation.
Opens Chromium on the LinkedIn jobs search, signs in when credentials are set,
and exposes the page through the DocumentQuery interface.
"""
from __future__ import annotations

import os
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator
from urllib.parse import urlencode

from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import Page, sync_playwright

from autoapply.config import AutomationConfig, get_env
from autoapply.document import DocumentQuery
from autoapply.log import get_logger
from autoapply.retry import retry
from autoapply.selectors import LINKEDIN_SELECTORS, SelectorKind, css_for

log = get_logger(__name__)

SEARCH_URL = "https://www.linkedin.com/jobs/search/"
INITIAL_LOAD_MS = 5000
SCROLL_SETTLE_MS = 2000
_ELEMENT_TIMEOUT_MS = 3000
_USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36"
)


def _first_visible(locator) -> Any | None:
    """First visible match of *locator*; never throws."""
    try:
        for candidate in locator.all():
            if candidate.is_visible():
                return candidate
    except PlaywrightError:
        return None
    return None


def build_search_url(config: AutomationConfig) -> str:
    params: dict[str, str] = {}
    if config.keywords:
        params["keywords"] = config.keywords
    if config.location:
        params["location"] = config.location
    if config.easy_apply_only:
        params["f_AL"] = "true"
    return SEARCH_URL + "?" + urlencode(params)


class PlaywrightDocument(DocumentQuery):
    """DocumentQuery over a live Playwright page; elements are Locators."""

    def __init__(self, page: Page, selectors: dict[SelectorKind, tuple[str, ...]] | None = None) -> None:
        self.page = page
        self.selectors = selectors or LINKEDIN_SELECTORS

    def _css(self, kind: SelectorKind) -> str:
        return css_for(kind, self.selectors)

    def find_all(self, kind: SelectorKind) -> list[Any]:
        return self.page.locator(self._css(kind)).all()

    def find_one(self, kind: SelectorKind, scope: Any = None) -> Any | None:
        root = scope if scope is not None else self.page
        return _first_visible(root.locator(self._css(kind)))

    # Reads treat a detached or slow element as blank.
    def text(self, element: Any) -> str:
        try:
            return (element.text_content(timeout=_ELEMENT_TIMEOUT_MS) or "").strip()
        except PlaywrightError:
            return ""

    def attribute(self, element: Any, name: str) -> str | None:
        try:
            return element.get_attribute(name, timeout=_ELEMENT_TIMEOUT_MS)
        except PlaywrightError:
            return None

    def current_url(self) -> str:
        return self.page.url

    def activate(self, element: Any) -> None:
        element.click(timeout=_ELEMENT_TIMEOUT_MS)

    def present(self, kind: SelectorKind) -> bool:
        return _first_visible(self.page.locator(self._css(kind))) is not None

    def request_more_content(self) -> bool:
        results = self.find_one(SelectorKind.RESULTS_LIST)
        if results is None:
            log.info("Results list not found; nothing more to load")
            return False
        try:
            previous = results.evaluate("el => el.scrollHeight")
            results.evaluate("el => el.scrollTo(0, el.scrollHeight)")
            self.wait(SCROLL_SETTLE_MS)
            current = results.evaluate("el => el.scrollHeight")
        except PlaywrightError as exc:
            log.warning("Scrolling the results list failed: %s", str(exc)[:120].split("\n")[0])
            return False
        if current == previous:
            log.info("Reached end of job listings")
            return False
        return True

    def wait(self, duration_ms: float) -> None:
        if duration_ms > 0:
            time.sleep(duration_ms / 1000)


@retry(max_attempts=3, base_delay=2.0, retryable=(PlaywrightError,))
def _goto(page: Page, url: str) -> None:
    page.goto(url, wait_until="domcontentloaded", timeout=25000)


def _needs_login(doc: PlaywrightDocument) -> bool:
    url = doc.current_url()
    return "login" in url or "authwall" in url or doc.present(SelectorKind.LOGIN_FORM)


def _login(page: Page, email: str, password: str) -> bool:
    try:
        page.get_by_label("Email or phone").fill(email)
        page.get_by_label("Password").fill(password)
        page.get_by_role("button", name="Sign in").click()
        page.wait_for_load_state("networkidle", timeout=15000)
        time.sleep(2)
        return True
    except PlaywrightError as exc:
        log.error("LinkedIn login failed: %s", str(exc)[:80].split("\n")[0])
        return False


def open_search_page(doc: PlaywrightDocument, config: AutomationConfig) -> None:
    """Navigate to the jobs search (signing in first if LinkedIn asks for it)."""
    if "linkedin.com/jobs" in doc.current_url():
        return
    url = build_search_url(config)
    log.info("Navigating to jobs page: %s", url)
    _goto(doc.page, url)

    if _needs_login(doc):
        email = get_env("LINKEDIN_EMAIL")
        password = get_env("LINKEDIN_PASSWORD")
        if not email or not password:
            log.warning("LinkedIn asks for sign-in but LINKEDIN_EMAIL/LINKEDIN_PASSWORD are not set")
        elif _login(doc.page, email, password):
            _goto(doc.page, url)

    doc.wait(INITIAL_LOAD_MS)
    log.info("Jobs page loaded")


def _clean_browsers_path() -> None:
    _pw = os.environ.get("PLAYWRIGHT_BROWSERS_PATH", "")
    if _pw and not Path(_pw).exists():
        os.environ.pop("PLAYWRIGHT_BROWSERS_PATH", None)


@contextmanager
def browser_session(config: AutomationConfig) -> Iterator[PlaywrightDocument]:
    """Launch Chromium, open the search page, and yield the page as a DocumentQuery."""
    _clean_browsers_path()
    with sync_playwright() as p:
        browser = p.chromium.launch(headless=config.headless)
        try:
            context = browser.new_context(
                viewport={"width": 1280, "height": 900},
                user_agent=_USER_AGENT,
            )
            page = context.new_page()
            page.set_default_timeout(20_000)
            doc = PlaywrightDocument(page)
            open_search_page(doc, config)
            yield doc
        finally:
            browser.close()
