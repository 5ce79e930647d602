import json
import logging
from dataclasses import dataclass, field, replace
from pathlib import Path

from src.constants import (
    DEFAULT_PROVIDER,
    MODELS,
    MSG_KEY_EMPTY,
    MSG_UNKNOWN_MODEL,
    STORE_KEY_SUFFIX,
    STORE_SELECTED_MODEL,
    STORE_SELECTED_PROVIDER,
)
from src.transcription.errors import ValidationError
from src.transcription.types import Provider

logger = logging.getLogger(__name__)

DEFAULT_STORE_PATH = Path(".transcriber_settings.json")


def model_ids(provider: Provider) -> tuple[str, ...]:
    return tuple(model_id for model_id, _ in MODELS[provider.value])


def default_model(provider: Provider) -> str:
    return model_ids(provider)[0]


def _key_name(provider: Provider) -> str:
    return f"{provider.value}{STORE_KEY_SUFFIX}"


KeyPairs = tuple[tuple[Provider, str], ...]


def _key_pairs(keys: dict[Provider, str]) -> KeyPairs:
    return tuple((p, keys[p]) for p in Provider if p in keys)


@dataclass(frozen=True)
class Settings:
    """Current selection + saved keys. Never mutated — replaced via with_*()."""

    provider: Provider = Provider(DEFAULT_PROVIDER)
    model: str = field(default_factory=lambda: default_model(Provider(DEFAULT_PROVIDER)))
    api_keys: KeyPairs = ()

    def api_key(self, provider: Provider | None = None) -> str:
        return dict(self.api_keys).get(provider or self.provider, "")

    def with_provider(self, provider: Provider) -> "Settings":
        match provider == self.provider:
            case True:
                return self
            case False:
                return replace(self, provider=provider, model=default_model(provider))

    def with_model(self, model: str) -> "Settings":
        match model in model_ids(self.provider):
            case True:
                return replace(self, model=model)
            case False:
                raise ValidationError(MSG_UNKNOWN_MODEL % (self.provider.value, model))

    def with_api_key(self, provider: Provider, key: str) -> "Settings":
        match key.strip():
            case "":
                raise ValidationError(MSG_KEY_EMPTY % provider.value)
            case k:
                return replace(self, api_keys=_key_pairs({**dict(self.api_keys), provider: k}))


class SettingsStore:
    """JSON key-value file — the only place settings touch disk."""

    def __init__(self, path: Path = DEFAULT_STORE_PATH):
        self._path = path
        self._store: dict[str, str] = {}
        self._load()

    def _load(self) -> None:
        match self._path.exists():
            case True:
                try:
                    with open(self._path) as f:
                        raw = json.load(f)
                    self._store = {str(k): v for k, v in raw.items() if isinstance(v, str)}
                except Exception as e:
                    logger.warning("Settings load failed: %s, starting fresh", e)
            case False:
                pass

    def _save(self) -> None:
        try:
            with open(self._path, "w") as f:
                json.dump(self._store, f, indent=2)
        except Exception as e:
            logger.warning("Settings save failed: %s", e)

    def get(self, key: str) -> str | None:
        return self._store.get(key)

    def load_settings(self) -> Settings:
        provider = Provider.parse(self.get(STORE_SELECTED_PROVIDER) or "") or Provider(DEFAULT_PROVIDER)
        stored_model = self.get(STORE_SELECTED_MODEL)
        model = stored_model if stored_model in model_ids(provider) else default_model(provider)
        keys = {
            p: key
            for p in Provider
            if (key := (self.get(_key_name(p)) or "").strip())
        }
        return Settings(provider=provider, model=model, api_keys=_key_pairs(keys))

    def save_settings(self, settings: Settings) -> None:
        self._store[STORE_SELECTED_PROVIDER] = settings.provider.value
        self._store[STORE_SELECTED_MODEL] = settings.model
        for provider, key in settings.api_keys:
            self._store[_key_name(provider)] = key
        self._save()
