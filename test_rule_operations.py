#!/usr/bin/env python3
"""
Tests for the skip, combine, insert, end and split rule operations.
"""

import sys
from pathlib import Path

# Add the project root to the path
sys.path.insert(0, str(Path(__file__).parent))

from core.rule_config import RuleConfiguration, RulePolicy
from core.subtitle_formats import SubtitleEntry
from core.timing_utils import Timecode
from processors.rule_operations import RuleProcessor


def make_entry(index, start_ms, end_ms, text):
    """Create an entry; newlines in text become separate lines."""
    return SubtitleEntry(index, Timecode.from_milliseconds(start_ms),
                         Timecode.from_milliseconds(end_ms), text.split('\n'))


def make_entries(*texts, duration=1000):
    """Create back-to-back entries of equal duration."""
    return [make_entry(i + 1, i * duration, (i + 1) * duration, text)
            for i, text in enumerate(texts)]


def texts(entries):
    return [entry.text for entry in entries]


def total_words(entries):
    return [word for entry in entries for word in entry.words()]


# Skip

def test_skip_removes_matching_entries_case_insensitively():
    processor = RuleProcessor(RuleConfiguration(skip_words=["[Music]", "subscribe"]))
    entries = make_entries("hello world", "[MUSIC] playing", "please Subscribe now", "bye now")

    assert processor.apply_skip(entries) == 2
    assert texts(entries) == ["hello world", "bye now"]
    assert [entry.index for entry in entries] == [1, 4]


def test_skip_matches_phrases_across_line_breaks():
    processor = RuleProcessor(RuleConfiguration(skip_words=["subscribe to"]))
    entries = make_entries("hello world", "please subscribe\nto the channel")

    assert processor.apply_skip(entries) == 1
    assert texts(entries) == ["hello world"]


def test_skip_without_words_is_noop():
    entries = make_entries("hello world")
    assert RuleProcessor(RuleConfiguration()).apply_skip(entries) == 0
    assert texts(entries) == ["hello world"]


# Combine

def test_combine_merges_pair_across_boundary():
    processor = RuleProcessor(RuleConfiguration(combine_pairs=[("you", "so")]))
    entries = [make_entry(1, 0, 1000, "thank you"), make_entry(2, 1000, 2000, "so much")]

    assert processor.apply_combine(entries) == 1
    assert texts(entries) == ["thank you so much"]
    assert entries[0].start.to_milliseconds() == 0
    assert entries[0].end.to_milliseconds() == 2000


def test_combine_ignores_case_and_punctuation():
    processor = RuleProcessor(RuleConfiguration(combine_pairs=[("you", "so")]))
    entries = make_entries("Thank YOU,", "So, much")

    assert processor.apply_combine(entries) == 1
    assert texts(entries) == ["Thank YOU, So, much"]


def test_combine_absorbs_one_successor_per_pass():
    processor = RuleProcessor(RuleConfiguration(combine_pairs=[("you", "so")]))
    entries = make_entries("thank you", "so you", "so much")

    assert processor.apply_combine(entries) == 1
    assert texts(entries) == ["thank you so you", "so much"]

    assert processor.apply_combine(entries) == 1
    assert texts(entries) == ["thank you so you so much"]


def test_combine_is_noop_without_match():
    processor = RuleProcessor(RuleConfiguration(combine_pairs=[("you", "so")]))
    entries = make_entries("thank you", "very much")
    before = [entry.snapshot() for entry in entries]

    assert processor.apply_combine(entries) == 0
    assert [entry.snapshot() for entry in entries] == before


# Insert

def test_insert_moves_leading_word_back():
    processor = RuleProcessor(RuleConfiguration(insert_words=["too"]))
    entries = make_entries("I want it", "too. But later")

    assert processor.apply_insert(entries) == (1, 0)
    assert texts(entries) == ["I want it too.", "But later"]


def test_insert_leaves_lone_word_by_default():
    processor = RuleProcessor(RuleConfiguration(insert_words=["too"]))
    entries = make_entries("I want it", "too")

    assert processor.apply_insert(entries) == (0, 0)
    assert texts(entries) == ["I want it", "too"]


def test_insert_always_trigger_removes_emptied_entry():
    policy = RulePolicy(insert_trigger='always')
    processor = RuleProcessor(RuleConfiguration(insert_words=["too"]), policy)
    entries = [make_entry(1, 0, 1000, "I want it"), make_entry(2, 1000, 2000, "too")]

    assert processor.apply_insert(entries) == (1, 1)
    assert texts(entries) == ["I want it too"]
    assert entries[0].end.to_milliseconds() == 2000


# End

def test_end_moves_longest_phrase_forward():
    processor = RuleProcessor(RuleConfiguration(end_words=["was", "it was"]))
    entries = make_entries("I think it was", "great yesterday")

    assert processor.apply_end(entries) == (1, 0)
    assert texts(entries) == ["I think", "it was great yesterday"]


def test_end_removes_emptied_entry_and_keeps_its_start():
    processor = RuleProcessor(RuleConfiguration(end_words=["the"]))
    entries = make_entries("hello there", "the", "end of story")

    assert processor.apply_end(entries) == (1, 1)
    assert texts(entries) == ["hello there", "the end of story"]
    assert entries[1].start.to_milliseconds() == 1000
    assert entries[1].end.to_milliseconds() == 3000


def test_end_treats_punctuation_as_significant():
    processor = RuleProcessor(RuleConfiguration(end_words=["so"]))
    entries = make_entries("and so.", "we left")

    assert processor.apply_end(entries) == (0, 0)
    assert texts(entries) == ["and so.", "we left"]


def test_end_prepends_to_first_line_of_next_entry():
    processor = RuleProcessor(RuleConfiguration(end_words=["the"]))
    entries = make_entries("we saw the", "big red\nbarn")

    processor.apply_end(entries)
    assert entries[1].lines == ["the big red", "barn"]


def test_end_never_touches_last_entry():
    processor = RuleProcessor(RuleConfiguration(end_words=["the"]))
    entries = make_entries("hello world", "look at the")

    assert processor.apply_end(entries) == (0, 0)
    assert texts(entries) == ["hello world", "look at the"]


# Split

def test_split_at_midpoint_divides_time_proportionally():
    processor = RuleProcessor(RuleConfiguration())
    entries = [make_entry(1, 0, 10000, "one two three four five six seven eight nine ten")]

    assert processor.apply_split(entries) == 1
    assert texts(entries) == ["one two three four five", "six seven eight nine ten"]
    assert entries[0].start.to_milliseconds() == 0
    assert entries[0].end.to_milliseconds() == 5000
    assert entries[1].start.to_milliseconds() == 5000
    assert entries[1].end.to_milliseconds() == 10000


def test_split_prefers_split_word_nearest_midpoint():
    processor = RuleProcessor(RuleConfiguration(split_words=["and"]))
    words = "w0 w1 w2 and w4 w5 w6 w7 and w9 w10 w11"
    entries = [make_entry(1, 0, 12000, words)]

    processor.apply_split(entries)
    assert texts(entries) == ["w0 w1 w2 and w4 w5 w6 w7", "and w9 w10 w11"]
    assert entries[0].end.to_milliseconds() == 8000


def test_split_tie_goes_to_earliest_candidate():
    processor = RuleProcessor(RuleConfiguration(split_words=["but"]))
    words = "a b c but e f g but i j".split()

    assert processor.choose_split_point(words) == 3


def test_split_word_in_first_position_is_not_a_candidate():
    processor = RuleProcessor(RuleConfiguration(split_words=["and"]))
    words = "and b c d e f g h i".split()

    assert processor.choose_split_point(words) == 4


def test_split_preserves_duration_on_uneven_division():
    processor = RuleProcessor(RuleConfiguration())
    entries = [make_entry(1, 0, 1001, "a b c d e f g h i")]

    processor.apply_split(entries)
    assert entries[0].end.to_milliseconds() == 1001 * 4 // 9
    assert entries[1].start == entries[0].end
    assert entries[1].end.to_milliseconds() == 1001
    assert entries[0].duration_ms + entries[1].duration_ms == 1001


def test_split_leaves_short_entries_alone():
    processor = RuleProcessor(RuleConfiguration(split_words=["and"]))
    entries = make_entries("one two three and five six seven eight")

    assert processor.apply_split(entries) == 0
    assert entries[0].lines == ["one two three and five six seven eight"]


def test_split_honours_max_line_words_policy():
    processor = RuleProcessor(RuleConfiguration(), RulePolicy(max_line_words=4, min_line_words=1))
    entries = make_entries("a b c d e")

    assert processor.apply_split(entries) == 1
    assert texts(entries) == ["a b", "c d e"]


# Shared properties

def test_rules_conserve_words_in_order():
    config = RuleConfiguration(
        combine_pairs=[("thank", "you")],
        insert_words=["too"],
        end_words=["the"],
        split_words=["and"],
    )
    processor = RuleProcessor(config)
    entries = make_entries(
        "we went to the", "store and bought milk and eggs and bread for everyone thank",
        "you all", "too and then", "left",
    )
    original = total_words(entries)

    processor.apply_combine(entries)
    processor.apply_insert(entries)
    processor.apply_end(entries)
    processor.apply_split(entries)

    assert total_words(entries) == original


def test_rules_are_idempotent_once_settled():
    config = RuleConfiguration(combine_pairs=[("you", "so")], insert_words=["too"], end_words=["the"])
    processor = RuleProcessor(config)
    entries = make_entries("hello there", "general kenobi")
    before = [entry.snapshot() for entry in entries]

    assert processor.apply_combine(entries) == 0
    assert processor.apply_insert(entries) == (0, 0)
    assert processor.apply_end(entries) == (0, 0)
    assert [entry.snapshot() for entry in entries] == before


def test_split_word_too_close_to_edge_is_not_a_candidate():
    processor = RuleProcessor(RuleConfiguration(split_words=["and"]))
    words = "Well and then we went to the big store".split()

    assert processor.choose_split_point(words) == 4
    assert processor.choose_split_point("a b c d e f g h and".split()) == 4


def test_split_word_candidates_follow_min_line_words():
    processor = RuleProcessor(RuleConfiguration(split_words=["and"]),
                              RulePolicy(max_line_words=8, min_line_words=3))
    words = "a b and d e f g h i j".split()

    assert processor.choose_split_point(words) == 5
    assert processor.choose_split_point("a b c and e f g h i j".split()) == 3
