from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import yaml

from models.errors import ConfigurationError, UnknownModelSelection
from utils.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class ModelEntry:
    name: str
    label: str
    web_search: bool = True
    enabled: bool = True


@dataclass
class ModelRegistry:
    _models: list[ModelEntry]
    _default_model: str

    @classmethod
    def from_yaml(cls, path: str | None = None, default_override: str | None = None) -> "ModelRegistry":
        registry_path = Path(path) if path else Path(__file__).resolve().parent.parent / "config" / "model_registry.yaml"
        if not registry_path.exists():
            raise ConfigurationError(f"Model registry not found at {registry_path}")

        data = yaml.safe_load(registry_path.read_text(encoding="utf-8"))
        if not data or "models" not in data:
            raise ConfigurationError("Invalid model registry: missing models")

        raw_models = data["models"]
        if not isinstance(raw_models, list):
            raise ConfigurationError("Invalid model registry: models must be a list")

        models: list[ModelEntry] = []
        for item in raw_models:
            if "name" not in item:
                raise ConfigurationError("Missing model name in registry entry")
            models.append(
                ModelEntry(
                    name=str(item["name"]),
                    label=str(item.get("label", item["name"])),
                    web_search=bool(item.get("web_search", True)),
                    enabled=bool(item.get("enabled", True)),
                )
            )

        default_model = default_override or data.get("default_model")
        registry = cls(_models=models, _default_model=str(default_model or ""))
        if not registry.is_enabled_model(registry._default_model):
            raise ConfigurationError(
                f"Default model '{registry._default_model}' is not an enabled registry model"
            )
        return registry

    @property
    def default_model(self) -> str:
        return self._default_model

    def find_model(self, model_name: str | None) -> ModelEntry | None:
        model_norm = (model_name or "").strip()
        if not model_norm:
            return None
        for entry in self._models:
            if entry.name == model_norm:
                return entry
        return None

    def is_enabled_model(self, model_name: str | None) -> bool:
        entry = self.find_model(model_name)
        return bool(entry and entry.enabled and entry.web_search)

    def list_enabled_models(self) -> list[ModelEntry]:
        return [m for m in self._models if m.enabled and m.web_search]

    def resolve(self, requested: str | None) -> tuple[str, UnknownModelSelection | None]:
        """
        Map a requested model to the one actually used.

        An empty request silently means the default. A request outside the
        allow-list also gets the default, plus the substitution as a value the
        caller turns into a user-visible notice.
        """
        if not requested or not requested.strip():
            return self._default_model, None
        if self.is_enabled_model(requested):
            return requested.strip(), None

        substitution = UnknownModelSelection(requested=requested, substitute=self._default_model)
        logger.warning(
            "Requested model not in allow-list",
            extra={"extra_fields": {"requested_model": requested, "effective_model": self._default_model}},
        )
        return self._default_model, substitution
