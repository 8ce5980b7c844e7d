import datetime

import pytest

from app.services.frontmatter_parser import parse


def test_parse_extracts_metadata_and_trims_body():
    raw = "---\ntitle: Hello\ntags: [a, b]\n---\nBody text.\n"

    result = parse(raw)

    assert result.metadata == {"title": "Hello", "tags": ["a", "b"]}
    assert result.body == "Body text."


def test_parse_keeps_unrecognized_keys_and_yaml_types():
    raw = "---\ntitle: Dated\ndate: 2024-06-01\nlayout: wide\nauthorID: 7\n---\n\n  # Heading\n\n"

    result = parse(raw)

    assert result.metadata["date"] == datetime.date(2024, 6, 1)
    assert result.metadata["layout"] == "wide"
    assert result.metadata["authorID"] == 7
    assert result.body == "# Heading"


@pytest.mark.parametrize(
    "raw",
    [
        "Just a body\nwith lines\n",
        "  ---\ntitle: indented\n---\nbody",
        "",
        "# Title\n---\ntitle: later\n---\n",
    ],
)
def test_parse_without_frontmatter_returns_input_untouched(raw):
    result = parse(raw)

    assert result.metadata == {}
    assert result.body == raw


def test_parse_unclosed_block_is_treated_as_body():
    raw = "---\ntitle: Never closed\n\nBody"

    result = parse(raw)

    assert result.metadata == {}
    assert result.body == raw


def test_parse_uses_first_block_only():
    raw = "---\ntitle: First\n---\nBody\n---\ntitle: Second\n---\nMore"

    result = parse(raw)

    assert result.metadata == {"title": "First"}
    assert result.body == "Body\n---\ntitle: Second\n---\nMore"


def test_parse_invalid_yaml_degrades_to_empty_metadata(caplog):
    raw = "---\ntitle: [unclosed\n  bad: : :\n---\nRemaining body  \n"

    with caplog.at_level("ERROR"):
        result = parse(raw)

    assert result.metadata == {}
    assert result.body == "Remaining body"
    assert any("Failed to parse frontmatter" in rec.message for rec in caplog.records)


@pytest.mark.parametrize("block", ["just a scalar", "- a\n- b", "42"])
def test_parse_non_mapping_yaml_is_ignored(block, caplog):
    raw = f"---\n{block}\n---\nBody"

    with caplog.at_level("ERROR"):
        result = parse(raw)

    assert result.metadata == {}
    assert result.body == "Body"
    assert any("not a mapping" in rec.message for rec in caplog.records)


def test_parse_nested_mapping_is_kept_shallow():
    raw = "---\ntitle: Nested\nseo:\n  description: hi\n  keywords: [x]\n---\nBody"

    result = parse(raw)

    assert result.metadata["seo"] == {"description": "hi", "keywords": ["x"]}
