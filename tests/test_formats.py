"""
Test suite for the JSON exchange format, configuration and logging setup.

    §1  Python objects ↔ Tags
    §2  JSON strings ↔ Tags
    §3  Malformed payloads
    §4  Configuration
    §5  Logging setup
"""

import json
import logging
import sys
import os
import pytest

# Add parent to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from tagtree.core import ValueType, ContainerType, Tag, compound, is_known
from tagtree.formats import from_python, to_python, from_json, to_json
from tagtree.ops import is_well_formed
from tagtree.config import TagTreeConfig, DEFAULT_CONFIG, load_config
from tagtree.errors import FormatError, TagTreeError
from tagtree.logging_utils import setup_logging


LEVEL = {"name": "", "type": "compound", "value": [
    {"name": "LevelName", "type": "string", "value": "world"},
    {"name": "Difficulty", "type": "byte", "value": 2},
    {"name": "Time", "type": "long", "value": 9223372036854775807},
    {"name": "Spawn", "type": "intArray", "value": [0, 64, -12]},
    {"name": "Players", "type": "list", "value": [
        {"name": "", "type": "compound", "value": [
            {"name": "Health", "type": "float", "value": 20.0},
            {"name": "", "type": "end", "value": None},
        ]},
    ]},
    {"name": "", "type": "end", "value": None},
]}


# ═══════════════════════════════════════════════════════════════════
#  §1  PYTHON OBJECTS ↔ TAGS
# ═══════════════════════════════════════════════════════════════════

class TestPython:

    def test_decode(self):
        root = from_python(LEVEL)
        assert root.type is ContainerType.COMPOUND
        assert root.value[0] == Tag("LevelName", ValueType.STRING, "world")
        assert root.value[3].value == (0, 64, -12)
        assert root.value[4].value[0].type is ContainerType.COMPOUND
        assert is_well_formed(root)

    def test_round_trip(self):
        assert to_python(from_python(LEVEL)) == LEVEL

    def test_encode_built_tree(self):
        tree = compound("c", [Tag("n", ValueType.SHORT_INT, 3)])
        assert to_python(tree) == {"name": "c", "type": "compound", "value": [
            {"name": "n", "type": "short", "value": 3},
            {"name": "", "type": "end", "value": None},
        ]}

    def test_missing_name_defaults_empty(self):
        assert from_python({"type": "int", "value": 1}).name == ""

    def test_missing_container_value(self):
        assert from_python({"name": "l", "type": "list"}).value == ()

    def test_unknown_type_kept(self, caplog):
        with caplog.at_level(logging.WARNING, logger="tagtree.formats"):
            tag = from_python({"name": "q", "type": "quaternion", "value": [1, 2, 3, 4]})
        assert tag.type == "quaternion"
        assert tag.value == (1, 2, 3, 4)
        assert not is_known(tag)
        assert "unknown tag type 'quaternion'" in caplog.text
        assert to_python(tag) == {"name": "q", "type": "quaternion", "value": [1, 2, 3, 4]}


# ═══════════════════════════════════════════════════════════════════
#  §2  JSON STRINGS ↔ TAGS
# ═══════════════════════════════════════════════════════════════════

class TestJson:

    def test_long_precision_survives(self):
        text = '{"name": "t", "type": "long", "value": 9223372036854775807}'
        tag = from_json(text)
        assert tag.value == 2 ** 63 - 1
        assert json.loads(to_json(tag))["value"] == 2 ** 63 - 1

    def test_round_trip(self):
        text = to_json(from_python(LEVEL), sort_keys=True)
        assert to_json(from_json(text), sort_keys=True) == text

    def test_invalid_json(self):
        with pytest.raises(FormatError):
            from_json("{not json")


# ═══════════════════════════════════════════════════════════════════
#  §3  MALFORMED PAYLOADS
# ═══════════════════════════════════════════════════════════════════

class TestMalformed:

    @pytest.mark.parametrize("payload", [
        [],
        "compound",
        {"name": "x"},
        {"name": "x", "type": 5},
        {"name": 3, "type": "int", "value": 1},
        {"name": "x", "type": "list", "value": "abc"},
        {"name": "x", "type": "compound", "value": [1]},
    ])
    def test_rejected(self, payload):
        with pytest.raises(FormatError):
            from_python(payload)

    def test_format_error_is_value_error(self):
        assert issubclass(FormatError, ValueError)
        assert issubclass(FormatError, TagTreeError)


# ═══════════════════════════════════════════════════════════════════
#  §4  CONFIGURATION
# ═══════════════════════════════════════════════════════════════════

class TestConfig:

    def test_defaults(self):
        assert DEFAULT_CONFIG.duplicate_names == "last"
        assert DEFAULT_CONFIG.strict_children is True
        assert DEFAULT_CONFIG.check_array_ranges is True
        assert load_config() is DEFAULT_CONFIG

    def test_bad_policy(self):
        with pytest.raises(ValueError):
            TagTreeConfig(duplicate_names="middle")

    def test_missing_file(self, tmp_path):
        assert load_config(tmp_path / "absent.json") is DEFAULT_CONFIG

    def test_nested_section(self, tmp_path):
        path = tmp_path / "tagtree.json"
        path.write_text(json.dumps({"tagtree": {"duplicate_names": "first",
                                                "strict_children": False}}),
                        encoding="utf-8")
        config = load_config(path)
        assert config.duplicate_names == "first"
        assert config.strict_children is False
        assert config.check_array_ranges is True

    def test_flat_with_unknown_keys(self, tmp_path):
        path = tmp_path / "tagtree.json"
        path.write_text(json.dumps({"check_array_ranges": False, "theme": "dark"}),
                        encoding="utf-8")
        assert load_config(str(path)) == TagTreeConfig(check_array_ranges=False)

    def test_not_an_object(self, tmp_path):
        path = tmp_path / "tagtree.json"
        path.write_text("[1, 2]", encoding="utf-8")
        with pytest.raises(ValueError):
            load_config(path)


# ═══════════════════════════════════════════════════════════════════
#  §5  LOGGING SETUP
# ═══════════════════════════════════════════════════════════════════

@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield root
    # only drop what setup_logging created; pytest manages its own handlers
    for handler in list(root.handlers):
        if handler not in handlers and \
                type(handler) in (logging.StreamHandler, logging.FileHandler):
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)


class TestLogging:

    def test_file_handler(self, tmp_path, restore_root_logger):
        log_file = tmp_path / "logs" / "tagtree.log"
        setup_logging(file_path=log_file)
        logging.getLogger("tagtree.test").debug("sentinel relocated")
        for handler in restore_root_logger.handlers:
            handler.flush()
        content = log_file.read_text(encoding="utf-8")
        assert "DEBUG - tagtree.test - sentinel relocated" in content

    def test_console_level(self, restore_root_logger):
        setup_logging(console_level=logging.INFO)
        console = [h for h in restore_root_logger.handlers
                   if isinstance(h, logging.StreamHandler)
                   and not isinstance(h, logging.FileHandler)]
        assert len(console) == 1
        assert console[0].level == logging.INFO


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
