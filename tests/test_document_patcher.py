from document_patcher import patch_document, replace_section

DOCUMENT = """# Hi

<!-- GOODREADS-PROGRESS-OVERRIDE:42 -->

<!-- GOODREADS-READING-CARD:START -->
old card
with two lines
<!-- GOODREADS-READING-CARD:END -->

Footer
<!-- GOODREADS-LAST-UPDATED:START --><!-- GOODREADS-LAST-UPDATED:END -->
"""


def test_replace_section_replaces_whole_span() -> None:
    patched = replace_section(DOCUMENT, "GOODREADS-READING-CARD", "new card")

    assert "old card" not in patched
    assert (
        "<!-- GOODREADS-READING-CARD:START -->\nnew card\n<!-- GOODREADS-READING-CARD:END -->"
        in patched
    )
    assert patched.startswith("# Hi\n\n<!-- GOODREADS-PROGRESS-OVERRIDE:42 -->")
    assert "Footer" in patched


def test_replace_section_missing_region_is_noop() -> None:
    assert replace_section(DOCUMENT, "GOODREADS-RECENT-READS", "anything") == DOCUMENT


def test_replace_section_body_with_backslashes_is_literal() -> None:
    patched = replace_section(DOCUMENT, "GOODREADS-READING-CARD", r"\1 \g<0> [a\]")
    assert "\n\\1 \\g<0> [a\\]\n" in patched


def test_patch_document_is_idempotent() -> None:
    sections = {
        "GOODREADS-READING-CARD": "| card |",
        "GOODREADS-LAST-UPDATED": "_updated_",
        "GOODREADS-RECENT-READS": "- book",
    }

    once = patch_document(DOCUMENT, sections)
    twice = patch_document(once, sections)

    assert once == twice
    assert once.count("GOODREADS-READING-CARD:START") == 1
    assert "<!-- GOODREADS-LAST-UPDATED:START -->\n_updated_\n<!-- GOODREADS-LAST-UPDATED:END -->" in once
