from __future__ import annotations

import pytest

from conversation_service.application.exceptions import ValidationError
from conversation_service.application.policies.tag_filter import TagFilter, build_tag_filter
from conversation_service.domain.value_objects.enums import TagType
from conversation_service.domain.value_objects.tag import Tag, unique_tags


def test_no_filter_when_both_values_missing():
    assert build_tag_filter(None, None) is None


def test_builds_filter_from_known_type():
    tag_filter = build_tag_filter("tag1", "subTopic")

    assert tag_filter == TagFilter(tag_id="tag1", tag_type=TagType.SUB_TOPIC)


def test_unknown_tag_type_rejected():
    with pytest.raises(ValidationError) as exc_info:
        build_tag_filter("tag1", "topic")

    assert "subTopic" in exc_info.value.detail


@pytest.mark.parametrize(("tag_id", "tag_type"), [("tag1", None), (None, "subTopic")])
def test_partial_filter_rejected(tag_id, tag_type):
    with pytest.raises(ValidationError):
        build_tag_filter(tag_id, tag_type)


def test_matches_requires_id_and_type():
    tag_filter = TagFilter(tag_id="tag1", tag_type=TagType.SUB_TOPIC)

    assert tag_filter.matches([Tag("tag2", TagType.SUB_TOPIC), Tag("tag1", TagType.SUB_TOPIC)])
    assert not tag_filter.matches([Tag("tag2", TagType.SUB_TOPIC)])
    assert not tag_filter.matches([])


def test_unique_tags_keeps_first_occurrence_order():
    a, b = Tag("a", TagType.SUB_TOPIC), Tag("b", TagType.SUB_TOPIC)

    assert unique_tags([b, a, b, a]) == (b, a)


def test_tag_from_dict_round_trips_stored_shape():
    raw = {"id": "tag1", "type": "subTopic"}

    assert Tag.from_dict(raw).to_dict() == raw
