# -*- coding: utf-8 -*-
# Pruebas del registro de perfiles y de las sobrescrituras

import json
import threading

import pytest

from ippprint.core.errors import InvalidCopies, InvalidQuality, LocalIOError, UnknownProfile
from ippprint.core.options import (PrintOptions, ProfileOverrides, apply_overrides,
                                   default_print_options, report_print_options)
from ippprint.core.profiles import (BUILTIN_PROFILES, DEFAULT_PROFILE, ProfileRegistry,
                                    describe_options, load_profiles_file)


@pytest.fixture
def registry():
    return ProfileRegistry()


def _options(**kwargs):
    values = dict(paper_size="A5", tray="Main", media_type="stationery", quality=4)
    values.update(kwargs)
    return PrintOptions(**values)


class TestBuiltinProfiles:
    # Biyección nombre <-> ID sobre todo el espacio de IDs incorporados
    def test_id_name_bijection(self, registry):
        for profile_id in range(len(BUILTIN_PROFILES)):
            name = registry.lookup(profile_id).name
            assert registry.id_of(name) == profile_id
            assert registry.name_of(profile_id) == name

    # Los IDs se aceptan como entero o como texto
    def test_resolve_by_id_and_name(self, registry):
        by_id = registry.resolve("17")
        by_name = registry.resolve("document-normal")
        assert by_id == by_name
        assert by_id.quality == 4
        assert registry.resolve(1).paper_size == "4x6.Borderless"

    # Identificador vacío resuelve al perfil por defecto
    def test_empty_identifier_is_default(self, registry):
        assert registry.lookup("").name == DEFAULT_PROFILE
        assert registry.lookup(None).profile_id == 0

    # Perfil inexistente por nombre o por ID
    def test_unknown_profile(self, registry):
        with pytest.raises(UnknownProfile) as excinfo:
            registry.resolve("no-such-profile")
        assert excinfo.value.identifier == "no-such-profile"

        with pytest.raises(UnknownProfile) as excinfo:
            registry.resolve("99")
        assert excinfo.value.identifier == "99"
        assert "0-18" in str(excinfo.value)

    # id_of devuelve -1 para nombres sin ID
    def test_id_of_unknown_name(self, registry):
        assert registry.id_of("missing") == -1

    # El listado respeta el orden de los IDs
    def test_list_ordered_by_id(self, registry):
        profiles = registry.list()
        assert [p.profile_id for p in profiles] == list(range(len(BUILTIN_PROFILES)))
        assert profiles[0].name == DEFAULT_PROFILE

    def test_describe(self, registry):
        assert registry.describe(0) == "A4 on stationery (Main, quality: 3)"
        assert registry.describe("nope") == "Unknown profile"


class TestOverrides:
    # Sobrescritura vacía no cambia nada
    def test_empty_override_is_noop(self, registry):
        for profile in registry.list():
            assert registry.resolve_with_overrides(profile.name, {}) == registry.resolve(profile.name)
            assert registry.resolve_with_overrides(profile.name, ProfileOverrides()) == profile.options

    # Valores cero o vacíos se consideran ausentes
    def test_zero_values_are_ignored(self, registry):
        overrides = ProfileOverrides(quality=0, copies=0, paper_size="", tray=None)
        assert registry.resolve_with_overrides("document-best", overrides) == registry.resolve("document-best")

    # Los campos presentes reemplazan a los del perfil
    def test_present_fields_replace(self, registry):
        options = registry.resolve_with_overrides(7, {"quality": 3, "page_range": "1-5", "copies": 2})
        assert options.quality == 3
        assert options.page_range == "1-5"
        assert options.copies == 2
        assert options.paper_size == "A4.Borderless"

    # Calidad fuera de {3,4,5}
    def test_invalid_quality(self, registry):
        with pytest.raises(InvalidQuality):
            registry.resolve_with_overrides(0, {"quality": 7})

    def test_invalid_copies(self):
        with pytest.raises(InvalidCopies):
            apply_overrides(_options(), {"copies": -2})

    # Copias por encima del mayor integer IPP
    def test_copies_beyond_ipp_integer(self):
        with pytest.raises(InvalidCopies):
            apply_overrides(_options(), {"copies": 3000000000})
        assert _options(copies=2147483647).copies == 2147483647

    # Campo desconocido en el mapeo
    def test_unknown_override_field(self):
        with pytest.raises(TypeError):
            apply_overrides(_options(), {"colour": "red"})


class TestRegistration:
    # Registrar con un nombre incorporado lo reemplaza (gana el último)
    def test_shadowing_builtin_name(self, registry):
        custom = _options(quality=5)
        registry.register("document-draft", custom)
        assert registry.resolve("document-draft") == custom
        # El nombre conserva su ID
        assert registry.id_of("document-draft") == 16
        assert registry.resolve(16) == custom

    # Perfil sin ID: accesible por nombre, ausente del listado por defecto
    def test_unnumbered_profile(self, registry):
        registry.register("label", _options())
        assert registry.resolve("label").paper_size == "A5"
        assert registry.id_of("label") == -1
        assert "label" not in [p.name for p in registry.list()]
        assert "label" in [p.name for p in registry.list(include_unnumbered=True)]

    # Un ID explícito se mueve al nuevo nombre sin romper la biyección
    def test_explicit_id_moves_to_new_name(self, registry):
        registry.register("my-draft", _options(), profile_id=16)
        assert registry.name_of(16) == "my-draft"
        assert registry.id_of("my-draft") == 16
        assert registry.id_of("document-draft") == -1
        assert registry.resolve("document-draft").quality == 3

    # Un nombre que cambia de ID libera el anterior
    def test_name_moves_to_new_id(self, registry):
        registry.register("document-best", _options(), profile_id=40)
        assert registry.id_of("document-best") == 40
        with pytest.raises(UnknownProfile):
            registry.name_of(18)

    def test_register_rejects_bad_input(self, registry):
        with pytest.raises(ValueError):
            registry.register("", _options())
        with pytest.raises(ValueError):
            registry.register("x", _options(), profile_id=-1)

    # Registros y lecturas concurrentes mantienen la biyección
    def test_concurrent_registration(self, registry):
        def worker(index):
            for i in range(50):
                registry.register(f"custom-{index}-{i}", _options(), profile_id=100 + index * 50 + i)
                registry.resolve(index % len(BUILTIN_PROFILES))

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        for profile in registry.list():
            assert registry.name_of(profile.profile_id) == profile.name
        assert len(registry) == len(BUILTIN_PROFILES) + 200


class TestProfilesFile:
    # Carga de perfiles personalizados desde JSON
    def test_load_profiles_file(self, registry, tmp_path):
        path = tmp_path / "profiles.json"
        path.write_text(json.dumps({
            "postcard": {"paper_size": "A6", "tray": "Rear", "media_type": "photographic-matte",
                         "quality": 5, "id": 30},
            "notes": {"paper_size": "A4", "tray": "Main", "media_type": "stationery", "quality": 3},
        }), encoding="utf-8")

        loaded = load_profiles_file(registry, path)

        assert loaded == ["postcard", "notes"]
        assert registry.resolve(30).paper_size == "A6"
        assert registry.id_of("notes") == -1

    def test_missing_file(self, registry, tmp_path):
        with pytest.raises(LocalIOError):
            load_profiles_file(registry, tmp_path / "missing.json")

    def test_invalid_entry(self, registry, tmp_path):
        path = tmp_path / "profiles.json"
        path.write_text(json.dumps({"bad": {"paper_size": "A4"}}), encoding="utf-8")
        with pytest.raises(LocalIOError):
            load_profiles_file(registry, path)

    # Entrada que no es un objeto JSON
    def test_non_object_entry(self, registry, tmp_path):
        path = tmp_path / "profiles.json"
        path.write_text(json.dumps({"bad": ["A4", "Main"]}), encoding="utf-8")
        with pytest.raises(LocalIOError):
            load_profiles_file(registry, path)

    # El id debe ser un entero no negativo
    @pytest.mark.parametrize("profile_id", ["30", -1, True, 3.5])
    def test_invalid_id(self, registry, tmp_path, profile_id):
        path = tmp_path / "profiles.json"
        path.write_text(json.dumps({"postcard": {"paper_size": "A6", "tray": "Rear", "media_type": "stationery",
                                                 "quality": 4, "id": profile_id}}), encoding="utf-8")
        with pytest.raises(LocalIOError):
            load_profiles_file(registry, path)
        assert "postcard" not in registry


def test_describe_options():
    assert describe_options(_options()) == "A5 on stationery (Main, quality: 4)"


class TestOptionPresets:
    # Opciones predefinidas para fotos y para el reporte de estado
    def test_default_print_options(self):
        options = default_print_options()
        assert (options.paper_size, options.tray, options.media_type) == (
            "4x6.Borderless", "Photo", "photographic-glossy")
        assert options.quality_label == "best"

    def test_report_print_options(self):
        options = report_print_options()
        assert (options.paper_size, options.tray, options.quality) == ("A4", "Main", 4)
        assert options.page_range == "all"
        assert options.copies == 1
