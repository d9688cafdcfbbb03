# -*- coding: utf-8 -*-
# Registro de perfiles de impresión
# Mapea nombre <-> ID denso y resuelve sobrescrituras sobre las opciones del perfil

import json
import logging
import threading
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple, Union

from ippprint.core.errors import LocalIOError, UnknownProfile
from ippprint.core.options import OverridesLike, PrintOptions, apply_overrides

logger = logging.getLogger(__name__)

DEFAULT_PROFILE = "default"


def _photo(paper_size: str, tray: str, media_type: str) -> PrintOptions:
    return PrintOptions(paper_size=paper_size, tray=tray, media_type=media_type, quality=5)


def _document(media_type: str, quality: int) -> PrintOptions:
    return PrintOptions(paper_size="A4", tray="Main", media_type=media_type, quality=quality)


# Perfiles incorporados; la posición en la lista es el ID numérico
BUILTIN_PROFILES: List[Tuple[str, PrintOptions]] = [
    (DEFAULT_PROFILE, _document("stationery", 3)),

    # 4x6" sin bordes
    ("photo-4x6-borderless-glossy", _photo("4x6.Borderless", "Photo", "photographic-glossy")),
    ("photo-4x6-borderless-matte", _photo("4x6.Borderless", "Photo", "photographic-matte")),
    ("photo-4x6-borderless-semigloss", _photo("4x6.Borderless", "Photo", "photographic-semi-gloss")),

    # 5x7" sin bordes
    ("photo-5x7-borderless-glossy", _photo("5x7.Borderless", "Photo", "photographic-glossy")),
    ("photo-5x7-borderless-matte", _photo("5x7.Borderless", "Photo", "photographic-matte")),
    ("photo-5x7-borderless-semigloss", _photo("5x7.Borderless", "Photo", "photographic-semi-gloss")),

    # A4 sin bordes
    ("photo-a4-borderless-glossy", _photo("A4.Borderless", "Auto", "photographic-glossy")),
    ("photo-a4-borderless-matte", _photo("A4.Borderless", "Auto", "photographic-matte")),
    ("photo-a4-borderless-semigloss", _photo("A4.Borderless", "Auto", "photographic-semi-gloss")),

    # A3 y A3+ requieren la bandeja trasera
    ("photo-a3-borderless-glossy", _photo("A3.Borderless", "Rear", "photographic-glossy")),
    ("photo-a3-borderless-matte", _photo("A3.Borderless", "Rear", "photographic-matte")),
    ("photo-a3-borderless-semigloss", _photo("A3.Borderless", "Rear", "photographic-semi-gloss")),
    ("photo-a3plus-borderless-glossy", _photo("13x19.Borderless", "Rear", "photographic-glossy")),
    ("photo-a3plus-borderless-matte", _photo("13x19.Borderless", "Rear", "photographic-matte")),
    ("photo-a3plus-borderless-semigloss", _photo("13x19.Borderless", "Rear", "photographic-semi-gloss")),

    # Documentos
    ("document-draft", _document("stationery", 3)),
    ("document-normal", _document("stationery", 4)),
    ("document-best", _document("stationery-coated", 5)),
]

# Agrupación por rango de IDs para el listado
PROFILE_CATEGORIES: List[Tuple[str, int, int]] = [
    ("Default", 0, 0),
    ('4x6" Borderless', 1, 3),
    ('5x7" Borderless', 4, 6),
    ("A4 Borderless", 7, 9),
    ("A3 Borderless", 10, 12),
    ('A3+ Borderless (13x19")', 13, 15),
    ("Documents", 16, 18),
]

MEDIA_DISPLAY_NAMES = {
    "photographic-glossy": "Glossy",
    "photographic-matte": "Matte",
    "photographic-semi-gloss": "Semi-gloss",
    "stationery": "Plain",
    "stationery-coated": "Coated",
}


def media_display_name(media_type: str) -> str:
    return MEDIA_DISPLAY_NAMES.get(media_type, media_type)


def describe_options(options: PrintOptions) -> str:
    return f"{options.paper_size} on {options.media_type} ({options.tray}, quality: {options.quality})"


@dataclass(frozen=True)
class Profile:
    name: str
    options: PrintOptions
    profile_id: int = -1

    @property
    def description(self) -> str:
        return describe_options(self.options)


def _as_profile_id(identifier) -> Optional[int]:
    if isinstance(identifier, bool):
        return None
    if isinstance(identifier, int):
        return identifier if identifier >= 0 else None
    text = str(identifier).strip()
    if text.isascii() and text.isdigit():
        return int(text)
    return None


# Registro de perfiles con vida controlada por el llamador.
# Un solo escritor a la vez; las lecturas ven siempre un par nombre/ID consistente.
class ProfileRegistry:

    def __init__(self, seed_builtins: bool = True):
        self._lock = threading.RLock()
        self._options: Dict[str, PrintOptions] = {}
        self._id_to_name: Dict[int, str] = {}
        self._name_to_id: Dict[str, int] = {}
        if seed_builtins:
            for profile_id, (name, options) in enumerate(BUILTIN_PROFILES):
                self.register(name, options, profile_id=profile_id)

    def __len__(self):
        with self._lock:
            return len(self._options)

    def __contains__(self, name):
        with self._lock:
            return name in self._options

    def register(self, name: str, options: PrintOptions, profile_id: Optional[int] = None):
        if not name:
            raise ValueError("profile name cannot be empty")
        if profile_id is not None and profile_id < 0:
            raise ValueError(f"profile ID must be >= 0 (got {profile_id})")

        with self._lock:
            if name in self._options:
                logger.debug(f"Profile '{name}' replaced by runtime registration")
            self._options[name] = options

            if profile_id is None:
                return

            # Mover el ID al nuevo nombre manteniendo la biyección
            previous_owner = self._id_to_name.get(profile_id)
            if previous_owner is not None and previous_owner != name:
                del self._name_to_id[previous_owner]
            previous_id = self._name_to_id.get(name)
            if previous_id is not None and previous_id != profile_id:
                del self._id_to_name[previous_id]

            self._id_to_name[profile_id] = name
            self._name_to_id[name] = profile_id

    def name_of(self, profile_id: int) -> str:
        with self._lock:
            try:
                return self._id_to_name[profile_id]
            except KeyError:
                raise UnknownProfile(
                    profile_id,
                    f"unknown profile ID: {profile_id} (valid IDs: {self._id_range_text()})",
                ) from None

    def id_of(self, name: str) -> int:
        with self._lock:
            return self._name_to_id.get(name, -1)

    def resolve(self, identifier: Union[str, int, None]) -> PrintOptions:
        return self.lookup(identifier).options

    def lookup(self, identifier: Union[str, int, None]) -> Profile:
        if identifier is None or (isinstance(identifier, str) and not identifier.strip()):
            identifier = DEFAULT_PROFILE

        with self._lock:
            profile_id = _as_profile_id(identifier)
            if profile_id is not None:
                name = self._id_to_name.get(profile_id)
                if name is None:
                    raise UnknownProfile(
                        identifier,
                        f"unknown profile ID: {profile_id} (valid IDs: {self._id_range_text()})",
                    )
            else:
                name = str(identifier).strip()

            options = self._options.get(name)
            if options is None:
                raise UnknownProfile(identifier)
            return Profile(name=name, options=options, profile_id=self._name_to_id.get(name, -1))

    def resolve_with_overrides(self, identifier: Union[str, int, None],
                               overrides: OverridesLike = None) -> PrintOptions:
        return apply_overrides(self.resolve(identifier), overrides)

    def list(self, include_unnumbered: bool = False) -> List[Profile]:
        with self._lock:
            profiles = [
                Profile(name=name, options=self._options[name], profile_id=profile_id)
                for profile_id, name in sorted(self._id_to_name.items())
            ]
            if include_unnumbered:
                profiles.extend(
                    Profile(name=name, options=options)
                    for name, options in sorted(self._options.items())
                    if name not in self._name_to_id
                )
            return profiles

    def describe(self, identifier: Union[str, int, None]) -> str:
        try:
            return self.lookup(identifier).description
        except UnknownProfile:
            return "Unknown profile"

    def _id_range_text(self) -> str:
        if not self._id_to_name:
            return "none"
        ids = sorted(self._id_to_name)
        if ids == list(range(ids[0], ids[-1] + 1)):
            return f"{ids[0]}-{ids[-1]}"
        return ", ".join(str(i) for i in ids)


# Carga perfiles personalizados desde un archivo JSON:
# {"mi-perfil": {"paper_size": "A4", "tray": "Main", "media_type": "stationery", "quality": 4, "id": 30}}
def load_profiles_file(registry: ProfileRegistry, path) -> List[str]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except OSError as e:
        raise LocalIOError(f"reading profiles file {path}: {e.strerror or e}") from e
    except json.JSONDecodeError as e:
        raise LocalIOError(f"profiles file {path} is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise LocalIOError(f"profiles file {path} must contain a JSON object")

    loaded = []
    for name, entry in data.items():
        if not isinstance(entry, dict):
            raise LocalIOError(f"profile '{name}' in {path} must be a JSON object")
        entry = dict(entry)
        profile_id = entry.pop("id", None)
        if profile_id is not None and (isinstance(profile_id, bool) or not isinstance(profile_id, int)
                                       or profile_id < 0):
            raise LocalIOError(f"profile '{name}' in {path}: id must be a non-negative integer (got {profile_id!r})")
        try:
            options = PrintOptions(**entry)
        except TypeError as e:
            raise LocalIOError(f"profile '{name}' in {path}: {e}") from e
        registry.register(name, options, profile_id=profile_id)
        loaded.append(name)

    logger.info(f"Loaded {len(loaded)} profile(s) from {path}")
    return loaded
