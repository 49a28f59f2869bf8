from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class SuiteDefinition:
    key: str
    display_name: str
    endpoint: str
    keywords: tuple[str, ...]
    operations: tuple[str, ...] = ()
    features: tuple[str, ...] = ()
    icon: str = "🔧"


DEFAULT_SUITES: tuple[SuiteDefinition, ...] = (
    SuiteDefinition(
        key="cupones",
        display_name="Cupones API",
        endpoint="/api/coupon",
        keywords=("cupones", "coupon", "cupon", "🎫"),
        operations=("GET", "POST", "PUT", "DELETE"),
        features=(
            "CRUD completo",
            "Cupones reutilizables/no-reutilizables",
            "Validaciones",
            "Códigos personalizados",
        ),
        icon="🎫",
    ),
    SuiteDefinition(
        key="media",
        display_name="Media API",
        endpoint="/api/media",
        keywords=("media", "📺", "🎬"),
        operations=("GET", "POST", "DELETE"),
        features=("Subida de archivos", "Gestión multimedia", "Validaciones de formato"),
        icon="📺",
    ),
    SuiteDefinition(
        key="auth",
        display_name="Auth API",
        endpoint="/api/auth",
        keywords=("auth", "authentication", "login", "🔐"),
        operations=("POST", "GET"),
        features=("Autenticación", "Tokens", "Validaciones de usuario"),
        icon="🔐",
    ),
    SuiteDefinition(
        key="user",
        display_name="User API",
        endpoint="/api/user",
        keywords=("user", "usuario", "profile", "👤"),
        operations=("GET", "POST", "PUT"),
        features=("Gestión de usuarios", "Perfiles", "Configuraciones"),
        icon="👤",
    ),
)


class SuiteRegistry:
    """Read-only, ordered collection of suite definitions keyed by ``key``."""

    def __init__(self, definitions: Iterable[SuiteDefinition] = DEFAULT_SUITES) -> None:
        self._suites: dict[str, SuiteDefinition] = {}
        for definition in definitions:
            if definition.key in self._suites:
                raise ValueError(f"Duplicate suite key: {definition.key}")
            self._suites[definition.key] = definition

    @classmethod
    def from_definitions(cls, definitions: Iterable[SuiteDefinition]) -> "SuiteRegistry":
        return cls(definitions)

    def __iter__(self) -> Iterator[SuiteDefinition]:
        return iter(self._suites.values())

    def __len__(self) -> int:
        return len(self._suites)

    def __contains__(self, key: object) -> bool:
        return key in self._suites

    def get(self, key: str) -> SuiteDefinition | None:
        return self._suites.get(key)

    def keys(self) -> list[str]:
        return list(self._suites)
