"""
Internationalization (i18n) module for the domain metrics system.

Provides translations for all user-facing messages in English (en) and
German (de).
"""


SUPPORTED_LANGUAGES = frozenset({"en", "de"})
DEFAULT_LANGUAGE = "en"


# Structure: {message_key: {language_code: translated_message}}
TRANSLATIONS: dict[str, dict[str, str]] = {
    # Engine messages
    "error.fetch_failed": {
        "en": "An error occurred while fetching data. Please try again.",
        "de": "Beim Abrufen der Daten ist ein Fehler aufgetreten. Bitte versuche es erneut.",
    },

    # CLI messages
    "cli.title": {
        "en": "DOMAIN ANALYSIS",
        "de": "DOMAIN-ANALYSE",
    },
    "cli.analysing_domain": {
        "en": "Analysing domain: {domain}",
        "de": "Analysiere Domain: {domain}",
    },
    "cli.invalid_domain": {
        "en": "Invalid domain: {domain} (expected e.g. example.com)",
        "de": "Ungültige Domain: {domain} (erwartet z. B. example.com)",
    },
    "cli.unchanged_input": {
        "en": "Domain unchanged since last submit; edit it to submit again.",
        "de": "Domain seit dem letzten Absenden unverändert; bitte ändern.",
    },
    "cli.prompt": {
        "en": "Enter domain (empty line to quit): ",
        "de": "Domain eingeben (leere Zeile beendet): ",
    },
    "cli.quota_notice": {
        "en": "Note: You can check up to 5 domains every 24 hours.",
        "de": "Hinweis: Du kannst bis zu 5 Domains alle 24 Stunden prüfen.",
    },
    "cli.missing_credentials": {
        "en": "Missing API keys: {keys}. Set them in the environment or .env, or use --dry-run.",
        "de": "Fehlende API-Schlüssel: {keys}. Setze sie in der Umgebung oder .env, oder nutze --dry-run.",
    },
    "cli.summary": {
        "en": "Summary: {succeeded}/{total} domain(s) analysed",
        "de": "Zusammenfassung: {succeeded}/{total} Domain(s) analysiert",
    },

    # Simulation mode messages
    "simulation.enabled": {
        "en": "⚠️ SIMULATION MODE - No real network requests",
        "de": "⚠️ SIMULATIONSMODUS - Keine echten Netzwerkanfragen",
    },
}


def get_message(
    key: str,
    language: str = DEFAULT_LANGUAGE,
    **kwargs,
) -> str:
    """
    Get a translated message by key.

    Args:
        key: The message key (e.g., 'error.fetch_failed')
        language: Language code ('en' or 'de'), defaults to 'en'
        **kwargs: Format arguments for message placeholders

    Returns:
        The translated and formatted message. Falls back to the default
        language, then to the key itself.
    """
    translations = TRANSLATIONS.get(key)

    if translations is None:
        return key

    message = translations.get(language)

    if message is None:
        message = translations.get(DEFAULT_LANGUAGE)

    if message is None:
        return key

    if kwargs:
        try:
            message = message.format(**kwargs)
        except KeyError:
            pass

    return message


def get_all_message_keys() -> set[str]:
    return set(TRANSLATIONS.keys())


def get_missing_translations(language: str) -> set[str]:
    """Get all message keys that are missing translations for a language."""
    return {
        key for key, translations in TRANSLATIONS.items()
        if language not in translations
    }
