import os

from dotenv import find_dotenv, load_dotenv

from finance_reports.logger import get_logger

logger = get_logger(__name__)


CONFIG_FILENAME = "config.yaml"

_CONFIG_FILE_PATH: str | None = None
_CONFIG_FILE_VALUES: dict[str, str] = {}
_EXTERNAL_ENV_KEYS: set[str] = set()

_CONFIG_KEYS = (
    "LOG_LEVEL",
    "LOG_DIR",
    "DATA_DIR",
    "TIMEZONE",
    "DEFAULT_CURRENCY",
    "DEFAULT_DATE_FORMAT",
    "DEFAULT_TIME_FORMAT",
    "TRAILING_MONTHS",
    "HOST",
    "PORT",
)


def _resolve_dotenv_path() -> str | None:
    config_dir = os.getenv("CONFIG_DIR")
    if config_dir:
        candidate = os.path.join(config_dir, ".env")
        if os.path.exists(candidate):
            return candidate
    resolved = find_dotenv(usecwd=True)
    return resolved or None


def _resolve_config_path() -> str:
    config_dir = os.getenv("CONFIG_DIR")
    if config_dir:
        return os.path.join(config_dir, CONFIG_FILENAME)
    cwd = os.getcwd()
    candidate = os.path.join(cwd, "config", CONFIG_FILENAME)
    if os.path.exists(candidate):
        return candidate
    return os.path.join(cwd, CONFIG_FILENAME)


def _strip_inline_comment(raw_value: str) -> str:
    in_single = False
    in_double = False
    escaped = False
    for index, char in enumerate(raw_value):
        if escaped:
            escaped = False
            continue
        if char == "\\":
            escaped = True
            continue
        if char == '"' and not in_single:
            in_double = not in_double
            continue
        if char == "'" and not in_double:
            in_single = not in_single
            continue
        if char == "#" and not in_single and not in_double:
            return raw_value[:index].rstrip()
    return raw_value


def _unquote_value(raw_value: str) -> str:
    if len(raw_value) < 2:
        return raw_value
    if raw_value[0] == raw_value[-1] and raw_value[0] in {'"', "'"}:
        return raw_value[1:-1]
    return raw_value


def read_config_file(path: str | None) -> dict[str, str]:
    """Read a flat ``KEY: value`` file. Nested YAML is not supported."""
    if not path or not os.path.exists(path):
        return {}

    values: dict[str, str] = {}
    with open(path, encoding="utf-8") as handle:
        for line in handle:
            stripped = line.strip()
            if not stripped or stripped.startswith("#"):
                continue
            if ":" not in stripped:
                continue
            key, raw_value = stripped.split(":", 1)
            key = key.strip()
            if not key:
                continue
            cleaned = _strip_inline_comment(raw_value).strip()
            if not cleaned:
                continue
            value = _unquote_value(cleaned)
            if value:
                values[key] = value
    return values


def load_environment() -> None:
    global _CONFIG_FILE_PATH
    global _CONFIG_FILE_VALUES
    global _EXTERNAL_ENV_KEYS

    dotenv_path = _resolve_dotenv_path()
    if dotenv_path:
        load_dotenv(dotenv_path=dotenv_path, override=False)

    _EXTERNAL_ENV_KEYS = set(os.environ.keys())

    _CONFIG_FILE_PATH = _resolve_config_path()
    _CONFIG_FILE_VALUES = read_config_file(_CONFIG_FILE_PATH)

    for key in _CONFIG_KEYS:
        if key not in os.environ and key in _CONFIG_FILE_VALUES:
            os.environ[key] = _CONFIG_FILE_VALUES[key]


def get_config_path() -> str | None:
    return _CONFIG_FILE_PATH


def is_env_override(name: str) -> bool:
    return name in _EXTERNAL_ENV_KEYS


def ensure_dir(path: str | None) -> None:
    if path and path not in {".", "./"}:
        os.makedirs(path, exist_ok=True)


def get_env_int(name: str, default: int, min_value: int | None = None) -> int:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("[ENV] Invalid %s='%s', using default %s.", name, raw, default)
        return default
    if min_value is not None and value < min_value:
        logger.warning(
            "[ENV] %s='%s' below minimum %s, using default %s.",
            name,
            raw,
            min_value,
            default,
        )
        return default
    return value


def get_env_choice(name: str, default: str, choices: tuple[str, ...]) -> str:
    raw = os.getenv(name)
    if not raw:
        return default
    value = raw.strip()
    if value not in choices:
        logger.warning(
            "[ENV] %s='%s' not one of %s, using default %s.",
            name,
            raw,
            ", ".join(choices),
            default,
        )
        return default
    return value


_ENV_KEYS_TO_LOG = (
    "LOG_LEVEL",
    "LOG_DIR",
    "DATA_DIR",
    "TIMEZONE",
    "DEFAULT_CURRENCY",
    "DEFAULT_DATE_FORMAT",
    "DEFAULT_TIME_FORMAT",
    "TRAILING_MONTHS",
)


def value_source(name: str) -> str:
    if os.getenv(name) is None:
        return "default"
    if is_env_override(name):
        return "env"
    return "config"


def _printable(value: str) -> str:
    return value.replace("\r", "\\r").replace("\n", "\\n")


def log_environment() -> None:
    logger.info("[ENV] Config file: %s", get_config_path() or "<none>")
    for key in _ENV_KEYS_TO_LOG:
        raw_value = os.getenv(key)
        value = "<unset>" if raw_value is None else _printable(raw_value)
        logger.info("[ENV] %s=%s (%s)", key, value, value_source(key))


DATE_FORMATS = ("MM/DD/YYYY", "DD/MM/YYYY")
TIME_FORMATS = ("12h", "24h")

DEFAULT_TRAILING_MONTHS = 5
PREFERENCES_FILENAME = "preferences.json"

# SSE headers to reduce proxy buffering and keep connections alive.
SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",
}

SSE_KEEPALIVE_SECONDS = 15.0


load_environment()

DATA_DIR = os.getenv("DATA_DIR", ".")
LOG_DIR = os.getenv("LOG_DIR")

ensure_dir(DATA_DIR)
ensure_dir(LOG_DIR)

DEFAULT_CURRENCY = (os.getenv("DEFAULT_CURRENCY") or "USD").upper()
DEFAULT_DATE_FORMAT = get_env_choice("DEFAULT_DATE_FORMAT", "MM/DD/YYYY", DATE_FORMATS)
DEFAULT_TIME_FORMAT = get_env_choice("DEFAULT_TIME_FORMAT", "12h", TIME_FORMATS)

TRAILING_MONTHS = get_env_int(
    "TRAILING_MONTHS",
    DEFAULT_TRAILING_MONTHS,
    min_value=0,
)

HOST = os.getenv("HOST", "127.0.0.1")
PORT = get_env_int("PORT", 8000, min_value=1)
