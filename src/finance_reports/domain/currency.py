from babel.numbers import format_currency as babel_format_currency

from finance_reports.core import settings
from finance_reports.logger import get_logger

logger = get_logger(__name__)

FALLBACK_CURRENCY = "USD"
FALLBACK_LOCALE = "en_US"

CURRENCY_LOCALES: dict[str, str] = {
    "USD": "en_US",
    "EUR": "es_ES",
    "GBP": "en_GB",
    "MXN": "es_MX",
    "ARS": "es_AR",
    "CLP": "es_CL",
    "COP": "es_CO",
    "PEN": "es_PE",
    "UYU": "es_UY",
    "PYG": "es_PY",
    "BOB": "es_BO",
    "VES": "es_VE",
}

HIDDEN_AMOUNT_MASK = "••••••"

_MAGNITUDES = (
    (1_000_000_000, "B"),
    (1_000_000, "M"),
    (1_000, "k"),
)


def resolve_currency(preferred_currency: str | None) -> tuple[str, str]:
    code = (preferred_currency or settings.DEFAULT_CURRENCY or FALLBACK_CURRENCY).strip().upper()
    locale = CURRENCY_LOCALES.get(code)
    if locale is None:
        logger.debug("[CURRENCY] Unsupported currency '%s', using %s.", code, FALLBACK_CURRENCY)
        return FALLBACK_CURRENCY, FALLBACK_LOCALE
    return code, locale


def _format(amount: float, currency: str, locale: str) -> str:
    # currency_digits=False keeps the locale pattern's two fraction digits,
    # even for currencies such as CLP or PYG that have none.
    return babel_format_currency(amount, currency, locale=locale, currency_digits=False)


def format_currency(amount: float, preferred_currency: str | None = None) -> str:
    currency, locale = resolve_currency(preferred_currency)
    try:
        return _format(amount, currency, locale)
    except Exception as exc:
        logger.warning(
            "[CURRENCY] Formatting %s in %s failed (%s), falling back to %s.",
            currency,
            locale,
            exc,
            FALLBACK_CURRENCY,
        )
        return _format(amount, FALLBACK_CURRENCY, FALLBACK_LOCALE)


def display_amount(amount: float, preferred_currency: str | None, hidden: bool) -> str:
    if hidden:
        return HIDDEN_AMOUNT_MASK
    return format_currency(amount, preferred_currency)


def _plain_number(value: float) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def format_large_number(value: float) -> str:
    for threshold, suffix in _MAGNITUDES:
        if value >= threshold:
            scaled = value / threshold
            if scaled % 1 == 0:
                return f"{scaled:.0f}{suffix}"
            return f"{scaled:.1f}{suffix}"
    return _plain_number(value)
