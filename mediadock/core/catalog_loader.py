"""Catalog loading and validation for YAML-based device recognition rules."""

from __future__ import annotations

import json
import logging
import os
from importlib import resources
from pathlib import Path
from typing import Any

import yaml
from jsonschema import ValidationError, validators

from mediadock.core.device_match import duplicate_patterns
from mediadock.core.errors import CatalogLoadError, CatalogValidationError
from mediadock.core.model import DeviceCatalog, LoadedCatalog, RecognitionRule

CATALOG_ENV_VAR = "MEDIADOCK_CATALOG"
_STRING_ONLY_TAGS = {
    "tag:yaml.org,2002:bool",
    "tag:yaml.org,2002:int",
    "tag:yaml.org,2002:float",
}
LOGGER = logging.getLogger(__name__)


class UniqueKeyLoader(yaml.SafeLoader):
    """YAML loader that rejects duplicate mapping keys and keeps IDs as strings."""


UniqueKeyLoader.yaml_implicit_resolvers = {
    key: list(value) for key, value in yaml.SafeLoader.yaml_implicit_resolvers.items()
}

# Device serials such as "0012" or "1E5" must not become numbers.
for first_char, mappings in list(UniqueKeyLoader.yaml_implicit_resolvers.items()):
    UniqueKeyLoader.yaml_implicit_resolvers[first_char] = [
        (tag, regexp)
        for tag, regexp in mappings
        if tag not in _STRING_ONLY_TAGS
    ]


def _construct_mapping(loader: UniqueKeyLoader, node: yaml.Node, deep: bool = False) -> dict[str, Any]:
    mapping: dict[str, Any] = {}
    for key_node, value_node in node.value:
        key = loader.construct_object(key_node, deep=deep)
        if key in mapping:
            raise CatalogValidationError(f"Duplicate key '{key}' in YAML document")
        mapping[key] = loader.construct_object(value_node, deep=deep)
    return mapping


UniqueKeyLoader.add_constructor(
    yaml.resolver.BaseResolver.DEFAULT_MAPPING_TAG,
    _construct_mapping,
)


def _load_schema_validator() -> Any:
    schema_text = resources.files("mediadock.schemas").joinpath("catalog.schema.json").read_text(
        encoding="utf-8"
    )
    schema = json.loads(schema_text)
    validator_cls = validators.validator_for(schema)
    validator_cls.check_schema(schema)
    return validator_cls(schema)


def _catalog_dirs() -> tuple[Path, Path]:
    xdg_config = Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))
    xdg_data = Path(os.environ.get("XDG_DATA_HOME", Path.home() / ".local/share"))
    return xdg_config / "mediadock/catalog.d", xdg_data / "mediadock/catalog.d"


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise CatalogLoadError(f"Could not read catalog file {path}: {exc}") from exc

    try:
        loaded = yaml.load(content, Loader=UniqueKeyLoader)
    except yaml.YAMLError as exc:
        raise CatalogValidationError(f"Invalid YAML in {path}: {exc}") from exc

    if not isinstance(loaded, dict):
        raise CatalogValidationError(f"Catalog file {path} must contain a mapping at root")
    return loaded


def _build_rules(doc: dict[str, Any], source: Path) -> list[RecognitionRule]:
    validator = _load_schema_validator()
    try:
        validator.validate(doc)
    except ValidationError as exc:
        path = ".".join(str(p) for p in exc.path)
        where = f" ({path})" if path else ""
        raise CatalogValidationError(f"Schema validation failed for {source}{where}: {exc.message}") from exc

    rules: list[RecognitionRule] = []
    for index, entry in enumerate(doc["devices"]):
        pattern = entry["pattern"].strip()
        if not pattern:
            raise CatalogValidationError(f"{source}: devices.{index}.pattern must not be blank")
        rules.append(
            RecognitionRule(
                pattern=pattern,
                name=entry["name"],
                kind=entry.get("kind", "media-player"),
                media_root=entry.get("media_root"),
            )
        )
    return rules


def _iter_catalog_paths() -> list[Path]:
    paths: list[Path] = []
    override = os.environ.get(CATALOG_ENV_VAR)
    if override:
        paths.append(Path(override).expanduser())
    for directory in _catalog_dirs():
        if not directory.exists() or not directory.is_dir():
            continue
        paths.extend(sorted(p for p in directory.iterdir() if p.suffix in {".yml", ".yaml"}))
    return paths


def load_catalog(path: Path | str | None = None) -> LoadedCatalog:
    """Load recognition rules from ``path`` or, if omitted, every configured source.

    Rule order is preserved from the sources; it decides which rule wins
    when several share a pattern.
    """
    sources = [Path(path)] if path is not None else _iter_catalog_paths()

    rules: list[RecognitionRule] = []
    warnings: list[str] = []
    for source in sources:
        doc = _read_yaml(source)
        rules.extend(_build_rules(doc, source))
        LOGGER.debug("Loaded catalog file %s", source)

    for pattern in duplicate_patterns(rules):
        warning = f"Pattern '{pattern}' is declared more than once; the first rule wins"
        LOGGER.warning(warning)
        warnings.append(warning)

    if not sources:
        warning = "No catalog files found; no devices will be recognized"
        LOGGER.warning(warning)
        warnings.append(warning)

    return LoadedCatalog(catalog=DeviceCatalog(rules=tuple(rules)), warnings=tuple(warnings))
