import pytest
import yaml

from docx_codegen.config import (
    AliasOrder,
    CodegenConfig,
    ConfigManager,
    NamespaceAliasOptions,
    load_handler,
    parse_alias_order,
    parse_misc_node_kinds,
)
from docx_codegen.core.handlers import ElementHandler
from docx_codegen.core.schema import OPENXML, SYSTEM, WORDPROCESSING
from docx_codegen.exceptions import ConfigurationError

BOOKMARK_START = "DocumentFormat.OpenXml.Wordprocessing.BookmarkStart"
HANDLER_PATH = "docx_codegen.core.handlers:ElementHandler"


@pytest.fixture
def manager(tmp_path, monkeypatch) -> ConfigManager:
    for name in (
        "DOCX_CODEGEN_ALIAS_ORDER",
        "DOCX_CODEGEN_IGNORE_UNKNOWN",
        "DOCX_CODEGEN_IGNORE_MISC",
        "DOCX_CODEGEN_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
    return ConfigManager(tmp_path / "config")


def test_defaults_without_file(manager: ConfigManager) -> None:
    config = manager.load_config()

    assert config.settings.namespace_alias_options.order is AliasOrder.ALIAS_FIRST
    assert config.settings.ignore_unknown_elements is False
    assert config.settings.parse_xml_parts is True
    assert config.log_level == "WARNING"
    assert manager.get_config_info()["config_exists"] is False


def test_file_values_are_merged(manager: ConfigManager) -> None:
    manager.config_dir.mkdir(parents=True)
    manager.config_file.write_text(
        yaml.safe_dump(
            {
                "alias_order": "namespace-first",
                "ignore_misc_node_types": ["comment"],
                "namespace_name": "Generated",
                "handlers": {BOOKMARK_START: HANDLER_PATH},
            }
        )
    )

    config = manager.load_config()

    assert config.settings.namespace_alias_options.order is AliasOrder.NAMESPACE_FIRST
    assert config.settings.ignore_misc_node_types == ["Comment"]
    assert config.settings.namespace_name == "Generated"
    assert list(config.handler_paths) == [BOOKMARK_START]


def test_environment_overrides_file(manager: ConfigManager, monkeypatch) -> None:
    manager.config_dir.mkdir(parents=True)
    manager.config_file.write_text("alias_order: namespace_first\nignore_unknown_elements: false\n")
    monkeypatch.setenv("DOCX_CODEGEN_ALIAS_ORDER", "none")
    monkeypatch.setenv("DOCX_CODEGEN_IGNORE_UNKNOWN", "yes")
    monkeypatch.setenv("DOCX_CODEGEN_IGNORE_MISC", "Comment,ProcessingInstruction")
    monkeypatch.setenv("DOCX_CODEGEN_LOG_LEVEL", "debug")

    config = manager.load_config()

    assert config.settings.namespace_alias_options.order is AliasOrder.NONE
    assert config.settings.ignore_unknown_elements is True
    assert config.settings.ignore_misc_node_types == ["Comment", "ProcessingInstruction"]
    assert config.log_level == "DEBUG"


def test_broken_yaml_falls_back_to_defaults(manager: ConfigManager, caplog) -> None:
    manager.config_dir.mkdir(parents=True)
    manager.config_file.write_text("alias_order: [unclosed\n")

    config = manager.load_config()

    assert config.settings.namespace_alias_options.order is AliasOrder.ALIAS_FIRST
    assert "Could not load config file" in caplog.text


def test_save_and_reload(manager: ConfigManager) -> None:
    config = CodegenConfig()
    config.settings.namespace_alias_options.order = AliasOrder.NONE
    config.settings.ignore_unknown_elements = True
    manager.save_config(config)

    saved = yaml.safe_load(manager.config_file.read_text())
    reloaded = ConfigManager(manager.config_dir).load_config()

    assert saved["alias_order"] == "none"
    assert reloaded.settings.namespace_alias_options.order is AliasOrder.NONE
    assert reloaded.settings.ignore_unknown_elements is True
    assert reloaded.settings.namespace_alias_options.reserved == config.settings.namespace_alias_options.reserved


def test_create_default_config(manager: ConfigManager) -> None:
    path = manager.create_default_config()

    assert path.exists()
    assert yaml.safe_load(path.read_text())["alias_order"] == "alias_first"


def test_build_settings_instantiates_handlers(manager: ConfigManager) -> None:
    config = CodegenConfig(handler_paths={BOOKMARK_START: HANDLER_PATH})

    settings = config.build_settings()

    handler = settings.handler_for(BOOKMARK_START)
    assert isinstance(handler, ElementHandler)
    settings.namespace_alias_options.order = AliasOrder.NONE
    assert config.settings.namespace_alias_options.order is AliasOrder.ALIAS_FIRST


@pytest.mark.parametrize(
    "path",
    [
        "no_colon_here",
        "docx_codegen.no_such_module:Handler",
        "docx_codegen.core.handlers:Missing",
        "docx_codegen.config:CodegenConfig",
    ],
)
def test_load_handler_errors(path: str) -> None:
    with pytest.raises(ConfigurationError):
        load_handler(path)


def test_parse_helpers() -> None:
    assert parse_alias_order(" Alias-First ") is AliasOrder.ALIAS_FIRST
    assert parse_misc_node_kinds(["processinginstruction"]) == ["ProcessingInstruction"]
    with pytest.raises(ConfigurationError):
        parse_alias_order("sideways")
    with pytest.raises(ConfigurationError):
        parse_misc_node_kinds(["Element"])


def test_alias_options_qualify_and_import() -> None:
    options = NamespaceAliasOptions()

    assert options.qualify("Paragraph", WORDPROCESSING) == "W.Paragraph"
    assert options.qualify("Uri", SYSTEM) == "Uri"
    assert options.qualify("OpenXmlUnknownElement", OPENXML) == "OpenXmlUnknownElement"
    assert options.build_import(WORDPROCESSING).sort_key == "W = DocumentFormat.OpenXml.Wordprocessing"

    reserved = NamespaceAliasOptions(reserved=frozenset({WORDPROCESSING}))
    assert reserved.qualify("Paragraph", WORDPROCESSING) == "Paragraph"
