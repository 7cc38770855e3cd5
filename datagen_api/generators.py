"""Faker instance management.

``GeneratorInstanceManager`` resolves a ``(locale, seed)`` pair to a
``GeneratorContext``:

- no seed: one shared context per locale, created on first use and kept for
  the life of the process. Every draw advances its random state, so two
  unseeded calls return different data.
- seed: a brand-new context seeded from the value and owned by the caller.
  The same ``(locale, seed)`` always replays the same sequence of draws.

A context chains the locale's Faker with an ``en_US`` fallback. Faker's base
providers sit under both, so a field without a translation still resolves.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterable, TypeVar

from faker import Faker

from datagen_api.errors import UnsupportedLocale
from datagen_api.validation import parse_leading_int

logger = logging.getLogger(__name__)

DEFAULT_LOCALE = "en"

# Public locale code -> Faker locale
SUPPORTED_LOCALES: dict[str, str] = {
    "en": "en_US",
    "de": "de_DE",
    "es": "es_ES",
    "fr": "fr_FR",
    "it": "it_IT",
    "ja": "ja_JP",
    "pt_br": "pt_BR",
    "zh_cn": "zh_CN",
}

T = TypeVar("T")


def resolve_locale(locale: str | None) -> str:
    """Normalize a requested locale to a key of ``SUPPORTED_LOCALES``."""
    if locale is None:
        return DEFAULT_LOCALE
    lowered = locale.lower()
    if lowered not in SUPPORTED_LOCALES:
        raise UnsupportedLocale(
            f"Unsupported locale: '{locale}'. "
            f"Supported locales are: {', '.join(SUPPORTED_LOCALES)}"
        )
    return lowered


def string_seed_hash(value: str) -> int:
    """Rolling ``h * 31 + c`` hash over UTF-16 code units, as signed 32-bit.

    Must stay bit-for-bit stable: existing seeded fixtures depend on it.
    """
    h = 0
    encoded = value.encode("utf-16-le", "surrogatepass")
    for i in range(0, len(encoded), 2):
        unit = encoded[i] | (encoded[i + 1] << 8)
        h = (h * 31 + unit) & 0xFFFFFFFF
    return h - 0x100000000 if h & 0x80000000 else h


def derive_seed(seed: Any) -> int | float:
    """Turn a seed value into the number fed to Faker."""
    if isinstance(seed, bool):
        logger.warning("Unexpected seed type: bool. Using default seed 0.")
        return 0
    if isinstance(seed, (int, float)):
        return seed
    if isinstance(seed, str):
        parsed = parse_leading_int(seed)
        return parsed if parsed is not None else string_seed_hash(seed)
    logger.warning("Unexpected seed type: %s. Using default seed 0.", type(seed).__name__)
    return 0


class GeneratorContext:
    """Ordered chain of Faker instances, looked up first-match.

    Attribute access is forwarded to the first layer that provides the
    attribute, so ``ctx.city()`` uses the locale's provider and
    ``ctx.catch_phrase()`` falls back to English when the locale lacks it.
    """

    def __init__(self, locale: str, seed: int | float | None = None) -> None:
        self.locale = locale
        self.seed = seed
        faker_locale = SUPPORTED_LOCALES[locale]
        layer_locales = [faker_locale]
        if faker_locale != SUPPORTED_LOCALES[DEFAULT_LOCALE]:
            layer_locales.append(SUPPORTED_LOCALES[DEFAULT_LOCALE])
        self._layers = [Faker(name) for name in layer_locales]
        if seed is not None:
            for layer in self._layers:
                layer.seed_instance(seed)

    def __getattr__(self, name: str) -> Any:
        # Only reached for names not set on the instance itself
        if name.startswith("_"):
            raise AttributeError(name)
        for layer in self._layers:
            try:
                return getattr(layer, name)
            except AttributeError:
                continue
        raise AttributeError(f"No generator layer for {self.locale!r} provides {name!r}")

    def produce(self, count: int, factory: Callable[[], T]) -> T | list[T]:
        """Call ``factory`` ``count`` times. A single item is returned unwrapped."""
        if count == 1:
            return factory()
        return [factory() for _ in range(count)]


class GeneratorInstanceManager:
    """Locale-keyed cache of unseeded contexts plus the seeded-context factory."""

    def __init__(self, context_factory: Callable[..., GeneratorContext] = GeneratorContext) -> None:
        self._context_factory = context_factory
        self._cache: dict[str, GeneratorContext] = {}

    def get_or_create(self, locale: str) -> GeneratorContext:
        """Return the shared unseeded context for a resolved locale."""
        context = self._cache.get(locale)
        if context is None:
            logger.info("Creating new non-seeded generator for locale: %s", locale)
            context = self._context_factory(locale)
            self._cache[locale] = context
        return context

    def get(self, locale: str | None = None, seed: Any = None) -> GeneratorContext:
        """Resolve ``(locale, seed)`` to a context.

        Raises:
            UnsupportedLocale: the locale is not one of ``SUPPORTED_LOCALES``.
        """
        resolved = resolve_locale(locale)
        if seed is None:
            return self.get_or_create(resolved)

        numeric_seed = derive_seed(seed)
        logger.info(
            "Creating new seeded generator for locale: %s, seed: %r -> %s",
            resolved, seed, numeric_seed,
        )
        return self._context_factory(resolved, numeric_seed)

    @property
    def cached_locales(self) -> Iterable[str]:
        return tuple(self._cache)

    def clear(self) -> None:
        self._cache.clear()


# Process-wide manager
_manager = GeneratorInstanceManager()


def get_generator_manager() -> GeneratorInstanceManager:
    """FastAPI dependency returning the process-wide manager."""
    return _manager
