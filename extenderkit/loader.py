"""
Definition loader - parses YAML extender definitions into registered control types
"""

import yaml
from pathlib import Path
from typing import Any, Dict, List, Optional
import logging

from .builder import ExtenderBuilder
from .control import ExtenderControl
from .errors import DefinitionError, ExtenderError
from .models import PropertyKind
from .registry import PropertyRegistry, default_registry

logger = logging.getLogger(__name__)


class DefinitionLoader:
    """Loads extender definitions from YAML files"""

    def __init__(
        self,
        definitions_dir: Optional[Path] = None,
        registry: Optional[PropertyRegistry] = None,
        base_class: type = ExtenderControl,
    ):
        self.definitions_dir = definitions_dir
        self.registry = registry if registry is not None else default_registry
        self.base_class = base_class
        self.extenders: Dict[str, type] = {}
        self._loaded_files: List[str] = []

    def load_all(self) -> Dict[str, type]:
        """Load every definition file in the definitions directory"""
        if self.definitions_dir is None or not self.definitions_dir.exists():
            raise DefinitionError(f"Definitions directory not found: {self.definitions_dir}")

        yaml_files = sorted(
            list(self.definitions_dir.rglob("*.yaml")) + list(self.definitions_dir.rglob("*.yml"))
        )
        for yaml_file in yaml_files:
            self.load_file(yaml_file)

        logger.info(f"Total extenders loaded: {len(self.extenders)}")
        return self.extenders

    def load_file(self, filepath: Path) -> List[type]:
        """Load extender definitions from a single YAML file"""
        filepath = Path(filepath)
        source = str(filepath)

        try:
            with open(filepath, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise DefinitionError(f"Invalid YAML: {e}", source) from e

        types = self.load_data(data, source)
        self._loaded_files.append(source)
        logger.info(f"Loaded {len(types)} extenders from {filepath.name}")
        return types

    def load_data(self, data: Any, source: str = "<data>") -> List[type]:
        """Register extenders from an already parsed document"""
        if not data:
            return []
        if not isinstance(data, dict) or not isinstance(data.get('extenders', []), list):
            raise DefinitionError("Expected a mapping with an 'extenders' list", source)

        types = []
        for raw in data.get('extenders', []):
            try:
                types.append(self._build_extender(raw, source))
            except DefinitionError:
                raise
            except (ExtenderError, ValueError, TypeError) as e:
                name = raw.get('name', 'unknown') if isinstance(raw, dict) else 'unknown'
                logger.error(f"Failed to load extender {name} from {source}: {e}")
                raise DefinitionError(str(e), source, name) from e
        return types

    def _build_extender(self, raw: Any, source: str) -> type:
        """Create and register one control type"""
        if not isinstance(raw, dict) or not raw.get('name'):
            raise DefinitionError("Extender definition needs a 'name'", source)

        name = str(raw['name'])
        if name in self.extenders:
            raise DefinitionError(f"Extender '{name}' is defined twice", source, name)

        control_type = type(name, (self.base_class,), {
            '__module__': __name__,
            '__doc__': raw.get('description', ''),
        })
        builder = ExtenderBuilder(control_type, registry=self.registry)

        if raw.get('behavior'):
            builder.behavior(raw['behavior'], script=raw.get('script'))
        for script in self._parse_requires(raw.get('requires', []), source, name):
            builder.requires(script)
        if raw.get('css'):
            builder.css(*self._as_list(raw['css']))
        if raw.get('targets'):
            builder.target(*self._as_list(raw['targets']))
        if raw.get('client_state'):
            builder.client_state()

        for prop in raw.get('properties', []) or []:
            self._parse_property(builder, prop, source, name)

        builder.build()
        self.extenders[name] = control_type
        return control_type

    def _parse_property(self, builder: ExtenderBuilder, raw: Any, source: str, extender: str) -> None:
        """Parse a single property definition"""
        if isinstance(raw, str):
            raw = {'name': raw}
        if not isinstance(raw, dict) or not raw.get('name'):
            raise DefinitionError("Property definition needs a 'name'", source, extender)

        required = raw.get('required', False)
        if not isinstance(required, bool):
            raise DefinitionError(
                f"Property '{raw['name']}': required must be true or false, got {required!r}",
                source, extender,
            )

        kind = PropertyKind.parse(raw.get('kind', PropertyKind.PLAIN_VALUE))
        default = raw.get('default')
        if default is None and kind is not PropertyKind.PLAIN_VALUE:
            default = ''

        builder.property(
            raw['name'],
            default=default,
            client_name=raw.get('client_name', ''),
            required=required,
            kind=kind,
            description=raw.get('description', ''),
            attribute=raw.get('attribute'),
        )

    def _parse_requires(self, raw: Any, source: str, extender: str) -> List[Any]:
        """Required scripts: plain names or {name, order} mappings"""
        scripts = []
        for index, item in enumerate(self._as_list(raw)):
            if isinstance(item, str):
                scripts.append((item, index))
            elif isinstance(item, dict) and item.get('name'):
                scripts.append((item['name'], int(item.get('order', index))))
            else:
                raise DefinitionError(f"Invalid required script entry: {item!r}", source, extender)
        return scripts

    @staticmethod
    def _as_list(value: Any) -> List[Any]:
        if value is None:
            return []
        if isinstance(value, (list, tuple)):
            return list(value)
        return [value]

    def get_extender(self, name: str) -> Optional[type]:
        """Get a loaded extender type by name"""
        return self.extenders.get(name)

    @property
    def stats(self) -> Dict[str, Any]:
        """Get statistics about loaded definitions"""
        return {
            'total_extenders': len(self.extenders),
            'total_properties': sum(
                len(self.registry.all_for(t)) for t in self.extenders.values()
            ),
            'files_loaded': len(self._loaded_files),
        }


def load_definitions(path: Path, registry: Optional[PropertyRegistry] = None) -> Dict[str, type]:
    """Load a definition file or directory and return the extenders by name."""
    path = Path(path)
    if path.is_dir():
        loader = DefinitionLoader(definitions_dir=path, registry=registry)
        return loader.load_all()
    loader = DefinitionLoader(registry=registry)
    loader.load_file(path)
    return loader.extenders
