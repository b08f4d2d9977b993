"""Tests for loading sources into documents (parser + processor)."""

import logging

import pytest

from asciidoc_transformer.asciidoc.processor import Processor
from asciidoc_transformer.types import SafeMode


@pytest.fixture
def processor():
    return Processor()


class TestDocumentHeader:
    def test_title(self, processor):
        doc = processor.load("= My Document\n\nBody.")
        assert doc.get_document_title() == "My Document"
        assert doc.attributes["doctitle"] == "My Document"

    def test_partitioned_title(self, processor):
        title = processor.load("= Main: Part Two: The Sequel\n").get_document_title(partition=True)
        assert title.main == "Main: Part Two"
        assert title.subtitle == "The Sequel"

    def test_untitled(self, processor):
        doc = processor.load("Just a paragraph.")
        assert doc.get_document_title() is None
        assert doc.get_refs() == {}

    def test_single_author(self, processor):
        doc = processor.load("= Doc\nJane Doe <jane@example.com>\n\nBody.")
        attrs = doc.get_attributes()
        assert attrs["author"] == "Jane Doe"
        assert attrs["firstname"] == "Jane"
        assert attrs["lastname"] == "Doe"
        assert attrs["email"] == "jane@example.com"
        assert attrs["authorinitials"] == "JD"
        assert "author_1" not in attrs

    def test_multiple_authors(self, processor):
        doc = processor.load("= Doc\nJane Doe; John Quincy Smith <john@example.com>\n")
        attrs = doc.get_attributes()
        assert attrs["authorcount"] == "2"
        assert attrs["author_1"] == "Jane Doe"
        assert attrs["author_2"] == "John Quincy Smith"
        assert attrs["middlename_2"] == "Quincy"
        assert attrs["email_2"] == "john@example.com"
        assert attrs["author"] == "Jane Doe"

    def test_revision_line(self, processor):
        doc = processor.load("= Doc\nJane Doe\nv2.1, 2023-06-01: Reworked\n")
        revision = doc.get_revision_info()
        assert revision.number == "2.1"
        assert revision.date == "2023-06-01"
        assert revision.remark == "Reworked"

    def test_revision_date_only(self, processor):
        doc = processor.load("= Doc\nJane Doe\n2023-06-01\n")
        revision = doc.get_revision_info()
        assert revision.number is None
        assert revision.date == "2023-06-01"

    def test_attribute_entries(self, processor):
        doc = processor.load("= Doc\n:description: A summary.\n:toc:\n\nBody.")
        attrs = doc.get_attributes()
        assert attrs["description"] == "A summary."
        assert attrs["toc"] == ""

    def test_get_attributes_returns_copy(self, processor):
        doc = processor.load("= Doc\n")
        doc.get_attributes()["doctitle"] = "changed"
        assert doc.attributes["doctitle"] == "Doc"


class TestApiAttributes:
    def test_intrinsic_attributes(self, processor):
        attrs = processor.load("Body.").get_attributes()
        assert attrs["safe-mode-name"] == "secure"
        assert attrs["safe-mode-level"] == "20"
        assert attrs["backend"] == "html5"

    def test_api_attribute_locked(self, processor):
        doc = processor.load(":product: FromDoc\n\nBody.", {"attributes": {"product": "FromApi"}})
        assert doc.attributes["product"] == "FromApi"

    def test_soft_api_attribute(self, processor):
        doc = processor.load(":product: FromDoc\n\nBody.", {"attributes": {"product": "FromApi@"}})
        assert doc.attributes["product"] == "FromDoc"

    def test_api_unset(self, processor):
        doc = processor.load(":product: FromDoc\n\nBody.", {"attributes": {"product": None}})
        assert "product" not in doc.attributes

    def test_safe_mode_option(self, processor):
        doc = processor.load("Body.", {"safe": "server"})
        assert doc.safe is SafeMode.SERVER
        assert doc.attributes["safe-mode-level"] == "10"


class TestSections:
    def test_refs_in_document_order(self, processor):
        doc = processor.load("= Doc\n\n== Alpha\n\ntext\n\n=== Beta\n\n== Gamma\n")
        refs = doc.get_refs()
        assert list(refs) == ["_alpha", "_beta", "_gamma"]
        assert [r.level for r in refs.values()] == [1, 2, 1]
        assert refs["_alpha"].title == "Alpha"

    def test_outline_starts_with_title(self, processor):
        doc = processor.load("= Doc\n\n== Alpha\n")
        assert [(r.id, r.level) for r in doc.get_outline()] == [("_doc", 0), ("_alpha", 1)]

    def test_section_named_like_title_keeps_its_id(self, processor):
        doc = processor.load("= Intro\n\n== Intro\n")
        assert list(doc.get_refs()) == ["_intro"]
        assert doc.title_ref.id == "_intro"

    def test_nesting(self, processor):
        doc = processor.load("== Alpha\n\n=== Beta\n\ntext\n\n== Gamma\n")
        assert [b.title for b in doc.blocks] == ["Alpha", "Gamma"]
        beta = doc.blocks[0].blocks[0]
        assert beta.title == "Beta"
        assert beta.blocks[0].context == "paragraph"

    def test_explicit_anchor(self, processor):
        doc = processor.load("[[custom-id]]\n== Custom\n")
        assert "custom-id" in doc.get_refs()
        assert doc.blocks[0].id == "custom-id"

    def test_duplicate_titles_get_unique_ids(self, processor):
        doc = processor.load("== Notes\n\n== Notes\n")
        assert list(doc.get_refs()) == ["_notes", "_notes_2"]

    def test_anchored_block_registered(self, processor):
        doc = processor.load("[[fig1,Figure One]]\nA captioned paragraph.\n")
        ref = doc.get_refs()["fig1"]
        assert ref.title == "Figure One"
        assert ref.context == "paragraph"

    def test_preamble_wrapped(self, processor):
        doc = processor.load("= Doc\n\nIntro text.\n\n== First\n\nBody.")
        assert doc.blocks[0].context == "preamble"
        assert doc.blocks[0].blocks[0].get_source() == "Intro text."

    def test_no_preamble_without_sections(self, processor):
        doc = processor.load("= Doc\n\nOnly text.")
        assert doc.blocks[0].context == "paragraph"


class TestBlocks:
    def test_paragraph_lines(self, processor):
        doc = processor.load("line one\nline two\n\nnext")
        assert doc.blocks[0].get_source() == "line one\nline two"
        assert doc.blocks[1].get_source() == "next"

    def test_comments_skipped(self, processor):
        doc = processor.load("// a comment\n////\nblock comment\n////\nVisible.")
        assert len(doc.blocks) == 1
        assert doc.blocks[0].get_source() == "Visible."

    def test_source_listing(self, processor):
        doc = processor.load("[source,python]\n----\nprint('hi')\n----\n")
        block = doc.blocks[0]
        assert block.context == "listing"
        assert block.style == "source"
        assert block.attributes["language"] == "python"
        assert block.get_source() == "print('hi')"

    def test_block_title(self, processor):
        doc = processor.load(".Example title\nSome text.")
        assert doc.blocks[0].title == "Example title"

    def test_admonition_paragraph(self, processor):
        block = processor.load("TIP: Use the cache.").blocks[0]
        assert block.context == "admonition"
        assert block.style == "TIP"
        assert block.get_source() == "Use the cache."

    def test_compound_block(self, processor):
        block = processor.load("====\nInside.\n\n* item\n====\n").blocks[0]
        assert block.context == "example"
        assert [child.context for child in block.blocks] == ["paragraph", "ulist"]

    def test_nested_lists(self, processor):
        block = processor.load("* one\n* two\n** nested\n* three\n").blocks[0]
        assert block.context == "ulist"
        assert [item.get_source() for item in block.blocks] == ["one", "two", "three"]
        nested = block.blocks[1].blocks[0]
        assert nested.context == "ulist"
        assert nested.blocks[0].get_source() == "nested"

    def test_ordered_list(self, processor):
        block = processor.load(". first\n. second\n").blocks[0]
        assert block.context == "olist"
        assert len(block.blocks) == 2

    def test_indented_literal(self, processor):
        block = processor.load("  indented\n    more").blocks[0]
        assert block.context == "literal"
        assert block.get_source() == "indented\n  more"

    def test_unterminated_block_warns(self, processor, caplog):
        with caplog.at_level(logging.WARNING):
            doc = processor.load("----\nnever closed")
        assert doc.blocks[0].get_source() == "never closed"
        assert "Unterminated listing block" in caplog.text


class TestIncludes:
    @pytest.fixture
    def docs(self, tmp_path):
        (tmp_path / "chapter.adoc").write_text("== Chapter\n\nIncluded text.\n")
        (tmp_path / "secret.adoc").write_text("Top secret.\n")
        nested = tmp_path / "docs"
        nested.mkdir()
        return tmp_path

    def test_resolved_below_secure(self, processor, docs):
        doc = processor.load(
            "= Book\n\ninclude::chapter.adoc[]\n", {"safe": "safe", "base_dir": str(docs)}
        )
        assert "_chapter" in doc.get_refs()
        assert "Included text." in doc.convert()

    def test_secure_turns_include_into_link(self, processor, docs):
        doc = processor.load("include::chapter.adoc[]\n", {"safe": "secure", "base_dir": str(docs)})
        assert "_chapter" not in doc.get_refs()
        assert '<a href="chapter.adoc">chapter.adoc</a>' in doc.convert()

    def test_no_base_dir_not_followed(self, processor):
        doc = processor.load("include::chapter.adoc[]\n", {"safe": "unsafe"})
        assert "link:chapter.adoc[]" in doc.blocks[0].get_source()

    def test_outside_base_dir_rejected_in_safe_mode(self, processor, docs):
        html = processor.load(
            "include::../secret.adoc[]\n", {"safe": "safe", "base_dir": str(docs / "docs")}
        ).convert()
        assert "Top secret." not in html
        assert "Unresolved directive" in html

    def test_outside_base_dir_allowed_when_unsafe(self, processor, docs):
        html = processor.load(
            "include::../secret.adoc[]\n", {"safe": "unsafe", "base_dir": str(docs / "docs")}
        ).convert()
        assert "Top secret." in html

    def test_missing_include(self, processor, docs, caplog):
        with caplog.at_level(logging.WARNING):
            html = processor.load(
                "include::nope.adoc[]\n", {"safe": "safe", "base_dir": str(docs)}
            ).convert()
        assert "Unresolved directive - include::nope.adoc[]" in html
        assert "nope.adoc" in caplog.text
