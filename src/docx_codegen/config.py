"""
Configuration management for docx-codegen.

Handles the generation settings and loading them from defaults, a YAML file,
and environment variables.
"""

from __future__ import annotations

import importlib
import logging
import os
import yaml
from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path
from typing import Any, Dict, FrozenSet, List, Optional

from .core.code_model import NamespaceImport
from .core.handlers import OpenXmlHandler
from .core.schema import (
    NAMESPACE_ALIASES,
    OPENXML,
    PACKAGING,
    SYSTEM,
    SYSTEM_IO,
    SYSTEM_XML,
)
from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)

MISC_NODE_KINDS = ("Comment", "ProcessingInstruction", "EntityReference")


class AliasOrder(Enum):
    """How namespace aliases are declared in the generated imports."""
    NONE = "none"
    ALIAS_FIRST = "alias_first"
    NAMESPACE_FIRST = "namespace_first"


@dataclass
class NamespaceAliasOptions:
    """Namespace alias policy used for imports and type names."""

    order: AliasOrder = AliasOrder.ALIAS_FIRST
    assignment_operator: str = "="
    reserved: FrozenSet[str] = frozenset({SYSTEM, SYSTEM_IO, SYSTEM_XML, OPENXML, PACKAGING})

    def alias_for(self, namespace: str) -> Optional[str]:
        if self.order is AliasOrder.NONE or namespace in self.reserved:
            return None
        return NAMESPACE_ALIASES.get(namespace)

    def build_import(self, namespace: str) -> NamespaceImport:
        alias = self.alias_for(namespace)
        return NamespaceImport(
            namespace=namespace,
            alias=alias,
            alias_first=self.order is not AliasOrder.NAMESPACE_FIRST,
            assignment_operator=self.assignment_operator,
        )

    def qualify(self, type_name: str, namespace: str) -> str:
        """Type name as written in generated code, alias-prefixed when aliased."""
        alias = self.alias_for(namespace)
        return f"{alias}.{type_name}" if alias else type_name


@dataclass
class SerializeSettings:
    """Settings for one generation request."""

    namespace_alias_options: NamespaceAliasOptions = field(default_factory=NamespaceAliasOptions)

    # Override handlers keyed by full type name
    handlers: Dict[str, OpenXmlHandler] = field(default_factory=dict)

    # lxml node kinds (see MISC_NODE_KINDS) to drop
    ignore_misc_node_types: List[str] = field(default_factory=list)

    ignore_unknown_elements: bool = False

    # Parse XML parts python-docx loads as plain bytes
    parse_xml_parts: bool = True

    namespace_name: str = "OpenXmlSample"

    def handler_for(self, type_name: str) -> Optional[OpenXmlHandler]:
        return self.handlers.get(type_name)

    def ignores_misc_node(self, node_kind: str) -> bool:
        return node_kind in self.ignore_misc_node_types


@dataclass
class CodegenConfig:
    """Main configuration for docx-codegen."""

    settings: SerializeSettings = field(default_factory=SerializeSettings)

    # Import paths ("package.module:ClassName") of handlers, keyed by type name
    handler_paths: Dict[str, str] = field(default_factory=dict)

    log_level: str = "WARNING"
    indent_json: Optional[int] = 2

    def build_settings(self) -> SerializeSettings:
        """Settings with the configured handlers instantiated."""
        handlers = dict(self.settings.handlers)
        for type_name, path in self.handler_paths.items():
            handlers[type_name] = load_handler(path)
        return SerializeSettings(
            namespace_alias_options=replace(self.settings.namespace_alias_options),
            handlers=handlers,
            ignore_misc_node_types=list(self.settings.ignore_misc_node_types),
            ignore_unknown_elements=self.settings.ignore_unknown_elements,
            parse_xml_parts=self.settings.parse_xml_parts,
            namespace_name=self.settings.namespace_name,
        )


def load_handler(path: str) -> OpenXmlHandler:
    """Instantiate a handler from a ``package.module:ClassName`` path."""
    module_name, _, class_name = path.partition(":")
    if not module_name or not class_name:
        raise ConfigurationError(f"Handler path must look like 'module:ClassName', got '{path}'")

    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise ConfigurationError(f"Could not import handler module '{module_name}': {e}") from e

    handler_cls = getattr(module, class_name, None)
    if handler_cls is None:
        raise ConfigurationError(f"Module '{module_name}' has no attribute '{class_name}'")

    handler = handler_cls()
    if not isinstance(handler, OpenXmlHandler):
        raise ConfigurationError(f"'{path}' is not an OpenXmlHandler")
    return handler


def parse_alias_order(value: str) -> AliasOrder:
    try:
        return AliasOrder(value.strip().lower().replace("-", "_"))
    except ValueError:
        choices = ", ".join(o.value for o in AliasOrder)
        raise ConfigurationError(f"Unknown alias order '{value}' (expected one of: {choices})")


def parse_misc_node_kinds(values: List[str]) -> List[str]:
    kinds = []
    for value in values:
        match = next((k for k in MISC_NODE_KINDS if k.lower() == value.strip().lower()), None)
        if match is None:
            raise ConfigurationError(
                f"Unknown node kind '{value}' (expected one of: {', '.join(MISC_NODE_KINDS)})"
            )
        kinds.append(match)
    return kinds


def _as_bool(value: str) -> bool:
    return value.lower() in ('true', '1', 'yes', 'on')


class ConfigManager:
    """Manages docx-codegen configuration from multiple sources."""

    def __init__(self, config_dir: Optional[Path] = None):
        self.config_dir = config_dir or Path.home() / '.docx-codegen'
        self.config_file = self.config_dir / 'config.yaml'
        self._config: Optional[CodegenConfig] = None

    def load_config(self) -> CodegenConfig:
        """Load configuration from all sources."""
        if self._config:
            return self._config

        # Start with defaults
        config = CodegenConfig()

        # Load from file if it exists
        if self.config_file.exists():
            file_config = self._load_from_file()
            config = self._merge_configs(config, file_config)

        # Override with environment variables
        env_config = self._load_from_env()
        config = self._merge_configs(config, env_config)

        self._config = config
        return config

    def _load_from_file(self) -> Dict[str, Any]:
        """Load configuration from YAML file."""
        try:
            with open(self.config_file, 'r') as f:
                return yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            logger.warning(f"Could not load config file {self.config_file}: {e}")
            return {}

    def _load_from_env(self) -> Dict[str, Any]:
        """Load configuration from environment variables."""
        env_config: Dict[str, Any] = {}

        alias_order = os.getenv('DOCX_CODEGEN_ALIAS_ORDER')
        if alias_order:
            env_config['alias_order'] = alias_order

        ignore_unknown = os.getenv('DOCX_CODEGEN_IGNORE_UNKNOWN')
        if ignore_unknown:
            env_config['ignore_unknown_elements'] = _as_bool(ignore_unknown)

        ignore_misc = os.getenv('DOCX_CODEGEN_IGNORE_MISC')
        if ignore_misc:
            env_config['ignore_misc_node_types'] = [k for k in ignore_misc.split(',') if k.strip()]

        log_level = os.getenv('DOCX_CODEGEN_LOG_LEVEL')
        if log_level:
            env_config['log_level'] = log_level.upper()

        return env_config

    def _merge_configs(self, base: CodegenConfig, override: Dict[str, Any]) -> CodegenConfig:
        """Merge a configuration dictionary into ``base``."""
        settings = base.settings
        aliases = settings.namespace_alias_options

        if 'alias_order' in override:
            aliases.order = parse_alias_order(str(override['alias_order']))
        if 'assignment_operator' in override:
            aliases.assignment_operator = str(override['assignment_operator'])
        if 'reserved_namespaces' in override:
            aliases.reserved = frozenset(override['reserved_namespaces'])

        if 'ignore_unknown_elements' in override:
            settings.ignore_unknown_elements = bool(override['ignore_unknown_elements'])
        if 'ignore_misc_node_types' in override:
            settings.ignore_misc_node_types = parse_misc_node_kinds(override['ignore_misc_node_types'])
        if 'parse_xml_parts' in override:
            settings.parse_xml_parts = bool(override['parse_xml_parts'])
        if 'namespace_name' in override:
            settings.namespace_name = str(override['namespace_name'])

        if 'handlers' in override:
            base.handler_paths.update(override['handlers'] or {})

        if 'log_level' in override:
            base.log_level = str(override['log_level']).upper()
        if 'indent_json' in override:
            base.indent_json = override['indent_json']

        return base

    def save_config(self, config: CodegenConfig) -> None:
        """Save configuration to file."""
        self.config_dir.mkdir(parents=True, exist_ok=True)

        settings = config.settings
        config_dict = {
            'alias_order': settings.namespace_alias_options.order.value,
            'assignment_operator': settings.namespace_alias_options.assignment_operator,
            'reserved_namespaces': sorted(settings.namespace_alias_options.reserved),
            'ignore_unknown_elements': settings.ignore_unknown_elements,
            'ignore_misc_node_types': list(settings.ignore_misc_node_types),
            'parse_xml_parts': settings.parse_xml_parts,
            'namespace_name': settings.namespace_name,
            'handlers': dict(config.handler_paths),
            'log_level': config.log_level,
            'indent_json': config.indent_json,
        }

        with open(self.config_file, 'w') as f:
            yaml.safe_dump(config_dict, f, default_flow_style=False, indent=2)

    def create_default_config(self) -> Path:
        """Create a default configuration file."""
        self.save_config(CodegenConfig())
        logger.info(f"Created default configuration at {self.config_file}")
        return self.config_file

    def get_config_info(self) -> Dict[str, Any]:
        """Get information about current configuration."""
        config = self.load_config()
        settings = config.settings

        return {
            'config_file': str(self.config_file),
            'config_exists': self.config_file.exists(),
            'alias_order': settings.namespace_alias_options.order.value,
            'ignore_unknown_elements': settings.ignore_unknown_elements,
            'ignore_misc_node_types': list(settings.ignore_misc_node_types),
            'parse_xml_parts': settings.parse_xml_parts,
            'namespace_name': settings.namespace_name,
            'handlers': sorted(config.handler_paths),
            'log_level': config.log_level,
        }


# Global config manager instance
_config_manager: Optional[ConfigManager] = None

def get_config_manager() -> ConfigManager:
    """Get the global config manager instance."""
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager()
    return _config_manager

def load_config() -> CodegenConfig:
    """Load the current configuration."""
    return get_config_manager().load_config()
