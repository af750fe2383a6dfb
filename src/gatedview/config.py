from __future__ import annotations

import json
from enum import Enum
from pathlib import Path
from typing import Any, Iterable, Mapping, Optional, Union

import yaml
from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)

from .errors import LoadError


class Orientation(str, Enum):
    PORTRAIT = "PORTRAIT"
    LANDSCAPE = "LANDSCAPE"
    UNSPECIFIED = "UNSPECIFIED"


SSL_KEYS = ("ignoreSslErrors", "ignoreSSLErrors", "ignore_ssl_errors")
LEGACY_SSL_KEY = "ignoreSSLErrors"


class PolicyConfig(BaseModel):
    """Immutable request policy for one browsing session.

    Documents use camelCase keys (``startUrl``, ``allowedDomains`` ...).
    Validation is strict: ``"true"`` is not a bool and a scalar is not a
    list, so a document either yields a complete config or a LoadError.
    """

    model_config = ConfigDict(frozen=True, strict=True, populate_by_name=True)

    domain: str
    start_url: str = Field(alias="startUrl", min_length=1)
    allowed_domains: tuple[str, ...] = Field(alias="allowedDomains", min_length=1)
    block_media: bool = Field(alias="blockMedia")
    ad_blocker: bool = Field(alias="adBlocker")
    ignore_ssl_errors: bool = Field(
        validation_alias=AliasChoices(*SSL_KEYS),
        serialization_alias="ignoreSslErrors",
    )
    orientation: Orientation

    @model_validator(mode="before")
    @classmethod
    def reject_conflicting_ssl_keys(cls, data: Any) -> Any:
        if isinstance(data, Mapping):
            values = [data[key] for key in SSL_KEYS if key in data]
            if any(value != values[0] for value in values[1:]):
                raise ValueError("conflicting values for ignoreSslErrors and ignoreSSLErrors")
        return data

    @field_validator("allowed_domains", mode="before")
    @classmethod
    def coerce_domain_list(cls, value: Any) -> Any:
        if isinstance(value, list):
            return tuple(value)
        return value

    @field_validator("allowed_domains")
    @classmethod
    def reject_blank_domains(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        if any(not entry for entry in value):
            raise ValueError("allowedDomains entries must be non-empty strings")
        return value

    @field_validator("orientation", mode="before")
    @classmethod
    def resolve_orientation(cls, value: Any) -> Orientation:
        if isinstance(value, Orientation):
            return value
        if not isinstance(value, str):
            raise ValueError("orientation must be a string")
        if value == Orientation.PORTRAIT.value:
            return Orientation.PORTRAIT
        if value == Orientation.LANDSCAPE.value:
            return Orientation.LANDSCAPE
        return Orientation.UNSPECIFIED

    def is_force_portrait(self) -> bool:
        return self.orientation is Orientation.PORTRAIT

    def is_force_landscape(self) -> bool:
        return self.orientation is Orientation.LANDSCAPE

    def matched_allowed_domain(self, url: Optional[str]) -> Optional[str]:
        if not url:
            return None
        for entry in self.allowed_domains:
            if entry in url:
                return entry
        return None

    def is_url_allowed(self, url: Optional[str]) -> bool:
        return self.matched_allowed_domain(url) is not None

    def to_document(self, legacy_ssl_key: bool = False) -> dict:
        document = self.model_dump(by_alias=True, mode="json")
        if legacy_ssl_key:
            document[LEGACY_SSL_KEY] = document.pop("ignoreSslErrors")
        return document

    @classmethod
    def from_builder(
        cls,
        domain: str,
        start_url: str,
        additional_domains: Iterable[str] = (),
        view_mode: str = "AUTO",
        block_media: bool = False,
        ads_blocker: bool = False,
        no_ssl_mode: bool = False,
    ) -> "PolicyConfig":
        """Assemble a config from app-builder form options.

        The primary domain is always the first allowed entry; blank
        additional domains are dropped. ``view_mode`` ``"AUTO"`` (or any
        unknown value) leaves orientation unlocked.
        """
        extra = [d.strip() for d in additional_domains if d and d.strip()]
        return parse_config(
            {
                "domain": domain,
                "startUrl": start_url,
                "allowedDomains": [domain, *extra],
                "blockMedia": block_media,
                "adBlocker": ads_blocker,
                "ignoreSslErrors": no_ssl_mode,
                "orientation": view_mode,
            },
            source="<builder>",
        )


def _validation_problems(exc: ValidationError) -> list[str]:
    problems = []
    for error in exc.errors():
        loc = ".".join(str(part) for part in error.get("loc", ())) or "<root>"
        problems.append(f"{loc}: {error.get('msg')}")
    return problems


def parse_config(data: Any, source: str = "<mapping>") -> PolicyConfig:
    if not isinstance(data, Mapping):
        raise LoadError(source, ["document root must be a mapping"])
    try:
        return PolicyConfig.model_validate(dict(data))
    except ValidationError as exc:
        raise LoadError(source, _validation_problems(exc)) from exc


def load_config_text(
    text: str, fmt: str = "json", source: str = "<string>"
) -> PolicyConfig:
    try:
        if fmt == "json":
            data = json.loads(text)
        else:
            data = yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise LoadError(source, [f"malformed {fmt} document: {exc}"]) from exc
    return parse_config(data, source=source)


def load_config(path: Union[str, Path]) -> PolicyConfig:
    cfg_path = Path(path)
    try:
        text = cfg_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise LoadError(str(cfg_path), [f"cannot read file: {exc}"]) from exc
    fmt = "json" if cfg_path.suffix.lower() == ".json" else "yaml"
    return load_config_text(text, fmt=fmt, source=str(cfg_path))


class HostSettings(BaseModel):
    journal_dir: str = "journals"
    headless: bool = True
    navigation_timeout_ms: int = 30000
    api_host: str = "127.0.0.1"
    api_port: int = 7600


def load_settings(path: Optional[str] = None) -> HostSettings:
    if not path:
        return HostSettings()
    cfg_path = Path(path)
    if not cfg_path.exists():
        return HostSettings()
    data = yaml.safe_load(cfg_path.read_text()) or {}
    return HostSettings(**data)
