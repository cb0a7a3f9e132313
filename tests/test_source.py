"""Unit tests for SourceDescriptor parsing."""

import pytest

from corpus_explorer.models.source import MalformedDescriptorError, SourceDescriptor


class TestFromDict:

    def test_minimal_descriptor(self):
        d = SourceDescriptor.from_dict({"name": "Beagle", "url": "https://example.org/Beagle"})

        assert d.name == "Beagle"
        assert d.category is None
        assert d.use_fonts is None
        assert d.page_range == (1, None)
        assert d.is_remote is True
        assert d.is_pdf is False

    def test_base_url_prefixes_relative_urls(self):
        d = SourceDescriptor.from_dict({"name": "Beagle", "url": "Beagle"}, base_url="https://en.wikipedia.org/wiki/")
        assert d.url == "https://en.wikipedia.org/wiki/Beagle"

    def test_base_url_ignored_for_absolute_urls_and_paths(self):
        remote = SourceDescriptor.from_dict({"name": "a", "url": "https://x.org/a"}, base_url="https://y.org")
        local = SourceDescriptor.from_dict({"name": "b", "url": "/data/b.txt"}, base_url="https://y.org")
        assert remote.url == "https://x.org/a"
        assert local.url == "/data/b.txt"
        assert local.is_remote is False

    def test_pdf_options(self):
        d = SourceDescriptor.from_dict({
            "name": "Act",
            "url": "data/legal/act.pdf",
            "category": "legal",
            "use_fonts": [12, "10"],
            "page_range": [2, 9],
        })
        assert d.is_pdf is True
        assert d.use_fonts == frozenset({10, 12})
        assert d.page_range == (2, 9)
        assert d.category == "legal"

    @pytest.mark.parametrize("last", ["Inf", "inf", None, float("inf")])
    def test_unbounded_page_range(self, last):
        d = SourceDescriptor.from_dict({"name": "a", "url": "a.pdf", "page_range": [3, last]})
        assert d.page_range == (3, None)

    @pytest.mark.parametrize("data", [
        {"url": "https://x.org"},
        {"name": "a"},
        {"name": "  ", "url": "https://x.org"},
        {"name": "a", "url": ""},
    ])
    def test_missing_required_fields(self, data):
        with pytest.raises(MalformedDescriptorError):
            SourceDescriptor.from_dict(data)

    def test_error_carries_identity(self):
        with pytest.raises(MalformedDescriptorError) as exc_info:
            SourceDescriptor.from_dict({"name": "Beagle"})
        assert exc_info.value.identity == "'Beagle'"
        assert "url" in str(exc_info.value)

    @pytest.mark.parametrize("page_range", [[0, 5], [5, 2], [1], "1-5", ["x", 2]])
    def test_invalid_page_range(self, page_range):
        with pytest.raises(MalformedDescriptorError):
            SourceDescriptor.from_dict({"name": "a", "url": "a.pdf", "page_range": page_range})

    def test_invalid_use_fonts(self):
        with pytest.raises(MalformedDescriptorError, match="use_fonts"):
            SourceDescriptor.from_dict({"name": "a", "url": "a.pdf", "use_fonts": ["big"]})

    def test_non_mapping_rejected(self):
        with pytest.raises(MalformedDescriptorError):
            SourceDescriptor.from_dict(["name", "url"])

    def test_malformed_descriptor_is_a_value_error(self):
        assert issubclass(MalformedDescriptorError, ValueError)


@pytest.mark.parametrize("field_name, value", [
    ("category", ["dogs", "cats"]),
    ("split_pattern", 123),
])
def test_non_string_options_rejected(field_name, value):
    with pytest.raises(MalformedDescriptorError, match=field_name):
        SourceDescriptor.from_dict({"name": "a", "url": "a.txt", field_name: value})
