"""Unit tests for the nfbrowser exception hierarchy."""

from __future__ import annotations

import pytest

from nfbrowser.exceptions import (
    BrowserError,
    BrowserNotLaunchedError,
    DirectoryNotFoundError,
    ErrorKind,
    ExtensionNotLoadedError,
    FunctionAlreadyExposedError,
    NavigationError,
    NFError,
    NoElementFoundError,
    PageError,
)


class TestErrorKinds:
    @pytest.mark.parametrize(
        ("error", "kind"),
        [
            (BrowserNotLaunchedError(), ErrorKind.BROWSER_NOT_LAUNCHED),
            (ExtensionNotLoadedError("Adblock Plus"), ErrorKind.EXTENSION_NOT_LOADED),
            (DirectoryNotFoundError("/missing"), ErrorKind.DIRECTORY_NOT_FOUND),
            (NoElementFoundError("https://a.test", "div"), ErrorKind.NO_ELEMENT_FOUND),
            (FunctionAlreadyExposedError("https://a.test", "f"), ErrorKind.FUNCTION_ALREADY_EXPOSED),
            (NavigationError("https://a.test", "name not resolved"), ErrorKind.NAVIGATION_FAILED),
        ],
    )
    def test_every_error_has_a_kind(self, error: NFError, kind: ErrorKind) -> None:
        assert isinstance(error, NFError)
        assert error.kind is kind

    def test_browser_errors(self) -> None:
        assert isinstance(BrowserNotLaunchedError(), BrowserError)
        assert isinstance(DirectoryNotFoundError("/x"), BrowserError)


class TestPageErrors:
    def test_no_element_found_carries_url_and_selector(self) -> None:
        err = NoElementFoundError("https://example.com/a", "div.content")
        assert isinstance(err, PageError)
        assert err.url == "https://example.com/a"
        assert err.selector == "div.content"
        assert "https://example.com/a" in str(err)
        assert "div.content" in str(err)

    def test_function_already_exposed(self) -> None:
        err = FunctionAlreadyExposedError("https://example.com", "onData")
        assert err.func_name == "onData"
        assert '"onData"' in str(err)

    def test_directory_not_found_message(self) -> None:
        err = DirectoryNotFoundError("/opt/abp")
        assert err.path == "/opt/abp"
        assert str(err) == 'Could not find directory: "/opt/abp"!'
