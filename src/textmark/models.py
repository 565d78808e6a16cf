"""Data model for extracted strings and the published catalog."""

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, model_validator


class Locale(StrEnum):
    """Supported locales. The set is closed: adding one means extending it here."""

    EN = "en"  # Default locale, always equal to the authored text
    RU = "ru"  # Human-translated
    PSEUDO = "pseudo"  # Generated by pseudolocalize(), never hand-edited


DEFAULT_LOCALE = Locale.EN
PSEUDO_LOCALE = Locale.PSEUDO
HUMAN_LOCALES: tuple[Locale, ...] = tuple(
    locale for locale in Locale if locale not in (DEFAULT_LOCALE, PSEUDO_LOCALE)
)


class StringContext(BaseModel):
    """Where a string was found. Part of the key, not of runtime lookup."""

    model_config = ConfigDict(frozen=True)

    file: str = Field(description="Monorepo-relative source path")
    component: str = Field(default="default", description="Enclosing component name")
    path: str = Field(default="root", description="Structural path, e.g. 'main > p:nth-child(2)'")


class ExtractedString(BaseModel):
    """One unit of translatable text.

    Serialized with the ``hash``/``text`` field names used by generated
    catalogs, so existing catalog files and the generated lookup module stay
    readable.
    """

    model_config = ConfigDict(populate_by_name=True)

    source_text: str = Field(alias="text")
    key: str = Field(alias="hash", min_length=1)
    translations: dict[str, str] = Field(default_factory=dict)
    context: StringContext
    stale: bool | None = Field(
        default=None,
        description="Set when carried over from a prior catalog without being re-extracted",
    )

    @model_validator(mode="after")
    def ensure_locale_slots(self) -> "ExtractedString":
        """Every locale has a slot, in canonical order; the default one mirrors the text."""
        ordered = {locale.value: self.translations.get(locale.value, "") for locale in Locale}
        ordered.update(sorted((k, v) for k, v in self.translations.items() if k not in ordered))
        if not ordered[DEFAULT_LOCALE.value]:
            ordered[DEFAULT_LOCALE.value] = self.source_text
        self.translations = ordered
        return self

    def translation(self, locale: str) -> str:
        """Return the stored translation for ``locale`` or an empty string."""
        return self.translations.get(locale, "")

    def to_record(self) -> dict[str, object]:
        """Plain-data form used in the sink and catalog files."""
        return self.model_dump(by_alias=True, exclude_none=True)


# key -> ExtractedString
Catalog = dict[str, ExtractedString]
