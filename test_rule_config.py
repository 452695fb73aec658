#!/usr/bin/env python3
"""
Tests for rule file loading and policy validation.
"""

import sys
from dataclasses import FrozenInstanceError
from pathlib import Path

import pytest

# Add the project root to the path
sys.path.insert(0, str(Path(__file__).parent))

from core.rule_config import ConfigError, RuleConfigLoader, RuleConfiguration, RulePolicy

RULES = '''
# rules for conference talks
SKIP: "[Music]", "subscribe"
COMBINE: "thank you", ("you", "so")
INSERT: "too"
END: "it was", "the"
SPLIT: "and", "But"
'''


def test_load_text_parses_every_keyword():
    config = RuleConfigLoader.load_text(RULES)

    assert config.skip_words == frozenset({"[music]", "subscribe"})
    assert config.combine_pairs == (("thank", "you"), ("you", "so"))
    assert config.insert_words == frozenset({"too"})
    assert config.end_words == ("it was", "the")
    assert config.split_words == frozenset({"and", "but"})


def test_keywords_are_case_insensitive_and_lists_may_be_empty():
    config = RuleConfigLoader.load_text('skip:\nSplit: "and"\n')

    assert config.skip_words == frozenset()
    assert config.split_words == frozenset({"and"})


def test_missing_keywords_default_to_empty():
    config = RuleConfigLoader.load_text('# nothing but a comment\n\n')
    assert config.is_empty()


def test_repeated_keyword_replaces_earlier_line():
    config = RuleConfigLoader.load_text('SPLIT: "and"\nSPLIT: "but"\n')
    assert config.split_words == frozenset({"but"})


def test_unknown_keyword_reports_line_number():
    with pytest.raises(ConfigError) as excinfo:
        RuleConfigLoader.load_text('SKIP: "a"\nREPLACE: "b"\n', source="rules.txt")

    assert excinfo.value.line_number == 2
    assert "rules.txt:2" in str(excinfo.value)
    assert "REPLACE" in str(excinfo.value)


def test_line_without_colon_is_rejected():
    with pytest.raises(ConfigError) as excinfo:
        RuleConfigLoader.load_text('SKIP "a"\n')
    assert excinfo.value.line_number == 1


def test_unquoted_text_is_rejected():
    with pytest.raises(ConfigError, match="outside quotes"):
        RuleConfigLoader.load_text('SKIP: "a", b\n')


def test_unterminated_quote_is_rejected():
    with pytest.raises(ConfigError, match="Unterminated"):
        RuleConfigLoader.load_text('SKIP: "a\n')


def test_empty_quoted_item_is_rejected():
    with pytest.raises(ConfigError):
        RuleConfigLoader.load_text('INSERT: ""\n')


def test_unpaired_combine_word_is_rejected():
    with pytest.raises(ConfigError, match="no partner"):
        RuleConfigLoader.load_text('COMBINE: "you"\n')

    with pytest.raises(ConfigError):
        RuleConfigLoader.load_text('COMBINE: "you", "thank you"\n')


def test_config_error_is_a_value_error():
    with pytest.raises(ValueError):
        RuleConfigLoader.load_text('BOGUS: "x"\n')


def test_default_rules_load():
    config = RuleConfigLoader.default()

    assert "[music]" in config.skip_words
    assert ("thank", "you") in config.combine_pairs
    assert "too" in config.insert_words
    assert config.end_words[0] == "and the"
    assert "because" in config.split_words


def test_to_text_reloads_to_equal_configuration():
    config = RuleConfigLoader.load_text(RULES)
    assert RuleConfigLoader.load_text(config.to_text()) == config

    default = RuleConfigLoader.default()
    assert RuleConfigLoader.load_text(default.to_text()) == default


def test_load_file_handles_bom(tmp_path):
    rule_file = tmp_path / "config.txt"
    rule_file.write_bytes(b'\xef\xbb\xbfSPLIT: "and"\n')

    assert RuleConfigLoader.load_file(rule_file).split_words == frozenset({"and"})


def test_load_file_missing_raises_io_error(tmp_path):
    with pytest.raises(IOError):
        RuleConfigLoader.load_file(tmp_path / "missing.txt")


def test_configuration_normalizes_items_and_is_frozen():
    config = RuleConfiguration(insert_words=["Too,"], end_words=["  It   WAS "],
                               combine_pairs=[("You", "SO")])

    assert config.insert_words == frozenset({"too"})
    assert config.end_words == ("it was",)
    assert config.combine_pairs == (("you", "so"),)

    with pytest.raises(FrozenInstanceError):
        config.split_words = frozenset({"and"})


def test_policy_defaults():
    policy = RulePolicy()

    assert policy.max_line_words == 8
    assert policy.min_line_words == 2
    assert policy.flexible_tie_break == 'next'
    assert policy.insert_trigger == 'followed_by_text'


@pytest.mark.parametrize("kwargs", [
    {"flexible_tie_break": "left"},
    {"insert_trigger": "sometimes"},
    {"max_iterations": 0},
    {"max_line_words": 1},
    {"min_line_words": 9},
    {"min_line_words": 0},
])
def test_policy_rejects_invalid_values(kwargs):
    with pytest.raises(ConfigError):
        RulePolicy(**kwargs)
