"""Tests for runtime lookups and the current locale."""

import asyncio
import threading
from pathlib import Path

import pytest
from structlog.testing import capture_logs

from textmark.catalog import CatalogStore
from textmark.errors import LookupMissError
from textmark.models import Locale, StringContext
from textmark.resolver import (
    Resolver,
    get_locale,
    locale_scope,
    placeholder,
    resolve,
    set_locale,
    use_resolver,
)
from textmark.scanner import extract_record


@pytest.fixture
def hello():
    record = extract_record("Hello", StringContext(file="a.tsx", component="App", path="h1"))
    record.translations["ru"] = "Привет"
    return record


@pytest.fixture
def bye():
    return extract_record("Bye", StringContext(file="a.tsx", component="App", path="p"))


@pytest.fixture
def resolver(hello, bye) -> Resolver:
    return Resolver({hello.key: hello, bye.key: bye})


class TestResolve:
    def test_requested_locale(self, resolver: Resolver, hello) -> None:
        assert resolver.resolve(hello.key, "ru") == "Привет"

    def test_default_locale(self, resolver: Resolver, hello) -> None:
        assert resolver.resolve(hello.key, "en") == "Hello"

    def test_untranslated_falls_back(self, resolver: Resolver, bye) -> None:
        assert resolver.resolve(bye.key, "ru") == "Bye"

    def test_pseudo(self, resolver: Resolver, hello) -> None:
        assert resolver.resolve(hello.key, "pseudo") == "[Ĥéļļó···]"

    def test_unknown_locale_falls_back(self, resolver: Resolver, hello) -> None:
        assert resolver.resolve(hello.key, "fr") == "Hello"

    def test_unknown_key(self, resolver: Resolver) -> None:
        assert resolver.resolve("0123456789abcdef") == "[01234567]"

    def test_short_unknown_key(self) -> None:
        assert placeholder("abc") == "[abc]"

    def test_uses_current_locale(self, resolver: Resolver, hello) -> None:
        with locale_scope("ru"):
            assert resolver.resolve(hello.key) == "Привет"
        assert resolver.resolve(hello.key) == "Hello"

    def test_lookup_miss(self, resolver: Resolver) -> None:
        with pytest.raises(LookupMissError):
            resolver.lookup("missing")


class TestStoreBacked:
    def test_missing_catalog(self, tmp_path: Path) -> None:
        """Before the first consolidation every lookup is a placeholder."""
        resolver = Resolver(store=CatalogStore(tmp_path / "strings.json"))
        assert resolver.resolve("0123456789abcdef") == "[01234567]"

    def test_catalog_appears_later(self, tmp_path: Path, hello) -> None:
        store = CatalogStore(tmp_path / "strings.json")
        resolver = Resolver(store=store)
        assert resolver.resolve(hello.key) == placeholder(hello.key)

        store.save({hello.key: hello})
        assert resolver.resolve(hello.key, "ru") == "Привет"

    def test_reload(self, tmp_path: Path, hello, bye) -> None:
        store = CatalogStore(tmp_path / "strings.json")
        store.save({hello.key: hello})
        resolver = Resolver(store=store)
        assert resolver.resolve(bye.key) == placeholder(bye.key)

        store.save({hello.key: hello, bye.key: bye})
        resolver.reload()
        assert resolver.resolve(bye.key) == "Bye"

    def test_corrupt_catalog(self, tmp_path: Path) -> None:
        path = tmp_path / "strings.json"
        path.write_text("{oops", encoding="utf-8")
        resolver = Resolver(store=CatalogStore(path))
        assert resolver.resolve("0123456789abcdef") == "[01234567]"

    def test_module_level_resolve(self, resolver: Resolver, hello) -> None:
        use_resolver(resolver)
        assert resolve(hello.key, "ru") == "Привет"


class TestLocale:
    def test_default(self) -> None:
        assert get_locale() == Locale.EN

    def test_set(self) -> None:
        set_locale("pseudo")
        assert get_locale() == Locale.PSEUDO

    def test_unknown_selects_default(self) -> None:
        """An unsupported locale never breaks a render; the default takes over."""
        set_locale("ru")
        with capture_logs() as logs:
            set_locale("fr")
        assert get_locale() == Locale.EN
        assert logs[0]["event"] == "Unknown locale, keeping default"
        assert logs[0]["locale"] == "fr"

    def test_unknown_in_scope(self, resolver: Resolver, hello) -> None:
        set_locale("ru")
        with locale_scope("fr") as active:
            assert active == Locale.EN
            assert resolver.resolve(hello.key) == "Hello"
        assert get_locale() == Locale.RU

    def test_scope_restores(self) -> None:
        set_locale("ru")
        with locale_scope("pseudo") as active:
            assert active == Locale.PSEUDO
        assert get_locale() == Locale.RU

    def test_threads_are_isolated(self) -> None:
        seen: list[Locale] = []

        def worker() -> None:
            set_locale("ru")
            seen.append(get_locale())

        thread = threading.Thread(target=worker)
        thread.start()
        thread.join()
        assert seen == [Locale.RU]
        assert get_locale() == Locale.EN

    def test_tasks_are_isolated(self) -> None:
        async def render(locale: str) -> Locale:
            with locale_scope(locale):
                await asyncio.sleep(0)
                return get_locale()

        async def main() -> list[Locale]:
            return await asyncio.gather(render("ru"), render("pseudo"), render("en"))

        assert asyncio.run(main()) == [Locale.RU, Locale.PSEUDO, Locale.EN]
