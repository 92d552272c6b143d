"""Tests for the README parsing pipeline."""

import pytest

from crate_readme import parser as parser_module
from crate_readme.models import NO_DESCRIPTION, ParsedReadme, UsageExample
from crate_readme.parser import MAX_EXAMPLES, ReadmeParser

FENCE = "```"


def fenced(language, code):
    return f"{FENCE}{language}\n{code}\n{FENCE}"


class TestParseUsageExamples:
    """Tests for example extraction end to end."""

    def test_disabled_extraction_returns_nothing(self):
        readme = "## Usage\n\n" + fenced("rust", "fn main() {}")

        assert ReadmeParser.parse_usage_examples(readme, include_examples=False) == []

    def test_empty_content(self):
        assert ReadmeParser.parse_usage_examples("", True) == []

    def test_usage_section_with_use_statement(self):
        readme = "## Usage\n\n" + fenced("rust", "use foo::Bar;")
        examples = ReadmeParser.parse_usage_examples(readme)

        assert len(examples) == 1
        assert examples[0].language == "rust"
        assert examples[0].title == "Basic Usage"
        assert examples[0].code == "use foo::Bar;"

    def test_examples_section_with_cargo_install(self):
        readme = "## Examples\n\n" + fenced("bash", "cargo install foo")
        examples = ReadmeParser.parse_usage_examples(readme)

        assert examples[0].title == "Installation"
        assert examples[0].language == "bash"

    def test_detects_example_types(self):
        readme = "\n".join([
            "## Examples",
            "",
            "Installation:",
            fenced("bash", "cargo install my_crate"),
            "",
            "Basic usage:",
            fenced("rust", 'fn main() {\n    println!("Hello, world!");\n}'),
            "",
            "Async example:",
            fenced("rust", "async fn fetch_data() {\n    let result = some_async_function().await;\n}"),
            "",
            "Configuration:",
            fenced("json", '{\n  "setting": "value"\n}'),
        ])
        examples = ReadmeParser.parse_usage_examples(readme)

        assert [e.title for e in examples] == [
            "Installation", "Complete Example", "Async Example", "JSON Configuration",
        ]

    def test_description_from_context(self):
        readme = (
            "## Usage\n\nThis is a description of how to use the library.\n\n"
            + fenced("rust", "use my_crate::Config;")
        )
        examples = ReadmeParser.parse_usage_examples(readme)

        assert len(examples) == 1
        assert examples[0].description == "This is a description of how to use the library."

    def test_blocks_outside_usage_sections_are_ignored(self):
        readme = "# Crate\n\n" + fenced("rust", "use a::B;") + "\n\n## API\n\n" + fenced("rust", "fn main() {}")

        assert ReadmeParser.parse_usage_examples(readme) == []

    def test_bare_usage_label_does_not_start_section(self):
        readme = "Usage:\n\n" + fenced("rust", "fn test() {}")

        assert ReadmeParser.parse_usage_examples(readme) == []

    def test_duplicates_across_sections_keep_first(self):
        readme = (
            "## Usage\n\n" + fenced("", "use my_crate::MyStruct;")
            + "\n\n## Examples\n\n" + fenced("rust", "use   my_crate::MyStruct;")
        )
        examples = ReadmeParser.parse_usage_examples(readme)

        assert len(examples) == 1
        assert examples[0].language == "text"

    def test_limits_examples(self):
        blocks = [fenced("rust", f"// Example {i}\nfn example_{i}() {{}}") for i in range(1, 16)]
        readme = "## Examples\n\n" + "\n\n".join(blocks)
        examples = ReadmeParser.parse_usage_examples(readme)

        assert len(examples) == MAX_EXAMPLES
        assert examples[0].code.startswith("// Example 1\n")
        assert examples[-1].code.startswith("// Example 10\n")

    def test_skips_empty_code_blocks(self):
        readme = "## Usage\n\n" + fenced("rust", "") + "\n\n" + fenced("rust", "fn main() {}")
        examples = ReadmeParser.parse_usage_examples(readme)

        assert len(examples) == 1
        assert examples[0].code == "fn main() {}"

    def test_language_aliases(self):
        readme = "## Examples\n\n" + "\n\n".join([
            fenced("rs", "fn main() {}"),
            fenced("sh", "cargo build"),
            fenced("shell", "cargo run"),
            fenced("yml", "name: CI"),
        ])
        examples = ReadmeParser.parse_usage_examples(readme)

        assert [e.language for e in examples] == ["rust", "bash", "bash", "yaml"]

    def test_internal_failure_yields_empty_list(self, monkeypatch):
        def explode(content):
            raise RuntimeError("boom")

        monkeypatch.setattr(parser_module, "extract_usage_sections", explode)

        assert ReadmeParser.parse_usage_examples("## Usage\n\n" + fenced("rust", "x")) == []


class TestDeduplicateExamples:
    def test_whitespace_insensitive_and_order_preserving(self):
        examples = [
            UsageExample(title="A", code="fn a() {\n    x\n}", language="rust"),
            UsageExample(title="B", code="let b = 1;", language="rust"),
            UsageExample(title="C", code="fn a() { x }", language="text", description="other"),
        ]

        assert [e.title for e in ReadmeParser.deduplicate_examples(examples)] == ["A", "B"]


class TestCleanMarkdown:
    """Tests for the body sanitizer."""

    def test_removes_badges(self):
        content = "\n# My Crate\n\n![CI](https://img.shields.io/badge/build-passing-green)\n\nSome content here.\n"
        cleaned = ReadmeParser.clean_markdown(content)

        assert "![CI]" not in cleaned
        assert "shields.io" not in cleaned
        assert "Some content here." in cleaned

    def test_keeps_meaningful_alt_text(self):
        cleaned = ReadmeParser.clean_markdown("![Documentation](https://docs.rs/my_crate/badge.svg)")

        assert cleaned == "Documentation"

    def test_relative_links_become_text(self):
        cleaned = ReadmeParser.clean_markdown("See the [documentation](./docs/guide.md) for more info.")

        assert cleaned == "See the documentation for more info."

    def test_absolute_links_are_kept(self):
        content = "See the [documentation](https://docs.rs/my_crate) for more info."

        assert ReadmeParser.clean_markdown(content) == content

    def test_linked_badge(self):
        cleaned = ReadmeParser.clean_markdown("[![Build Status](badge.svg)](./ci.yml)")

        assert cleaned == "Build Status"

    def test_collapses_blank_lines_and_trims(self):
        cleaned = ReadmeParser.clean_markdown("\n\n# Title\n\n\n\nContent here.\n\n\n\n\nMore content.\n   ")

        assert cleaned == "# Title\n\nContent here.\n\nMore content."

    def test_empty_content(self):
        assert ReadmeParser.clean_markdown("") == ""

    @pytest.mark.parametrize("content", [
        "![![ab](x)](y)",
        "[![Build](badge.svg)](link)\n\n\n\ntext",
        "[a]([b](c))",
        "![abcd](![x](y))",
        "plain text\n\n\n",
        "[](empty) ![](also-empty)",
    ])
    def test_idempotent(self, content):
        once = ReadmeParser.clean_markdown(content)

        assert ReadmeParser.clean_markdown(once) == once

    def test_internal_failure_returns_original(self, monkeypatch):
        class Broken:
            def sub(self, *args):
                raise RuntimeError("boom")

        monkeypatch.setattr(parser_module, "IMAGE_PATTERN", Broken())

        assert ReadmeParser.clean_markdown("![alt text](x)") == "![alt text](x)"


class TestExtractDescription:
    """Tests for the short description."""

    def test_first_substantial_paragraph(self):
        content = (
            "\n# My Crate\n\n![Badge](badge.svg)\n\n"
            "This is a description of the crate. It provides useful functionality for Rust developers.\n\n"
            "## Installation\n\nAdd this to your Cargo.toml...\n"
        )

        assert ReadmeParser.extract_description(content) == (
            "This is a description of the crate. It provides useful functionality for Rust developers."
        )

    def test_badge_then_text(self):
        assert ReadmeParser.extract_description("![Build](url)\n\nThis project does X.") == "This project does X."

    def test_skips_headers_and_badges(self):
        content = "# My Crate\n\n[![Build](badge.svg)](link)\n\n![Another Badge](badge2.svg)\n\nThis is the actual description."

        assert ReadmeParser.extract_description(content) == "This is the actual description."

    def test_multi_line_paragraph(self):
        content = (
            "# My Crate\n\nThis is the first line of description.\n"
            "This is the second line that continues the description.\n\n## Next Section\n"
        )

        assert ReadmeParser.extract_description(content) == (
            "This is the first line of description. This is the second line that continues the description."
        )

    def test_stops_at_next_section(self):
        content = "# My Crate\n\nThis is the description.\n## Installation\n\nThis should not be included."

        assert ReadmeParser.extract_description(content) == "This is the description."

    def test_short_lines_before_seed_are_skipped(self):
        content = "# T\n\nshort\n\nThis line is definitely long enough."

        assert ReadmeParser.extract_description(content) == "This line is definitely long enough."

    def test_continuation_respects_length_limit(self):
        first = "a" * 250
        content = f"{first}\n{'b' * 60}\nshort tail"

        assert ReadmeParser.extract_description(content) == first

    def test_overlong_seed_is_truncated(self):
        description = ReadmeParser.extract_description("word " * 100)

        assert len(description) <= 300
        assert description.endswith("...")

    def test_fallback_for_empty_content(self):
        assert ReadmeParser.extract_description("") == NO_DESCRIPTION

    def test_fallback_when_only_headers(self):
        assert ReadmeParser.extract_description("# Title\n\n## Section\n\nshort") == NO_DESCRIPTION

    def test_internal_failure_yields_fallback(self):
        assert ReadmeParser.extract_description(None) == NO_DESCRIPTION


class TestParse:
    def test_empty_document(self):
        parsed = ReadmeParser.parse("")

        assert parsed == ParsedReadme(cleaned_body="", description=NO_DESCRIPTION, examples=[])

    def test_pipeline_uses_raw_text_for_examples(self):
        readme = (
            "# demo\n\n[![CI](badge.svg)](./ci)\n\nA demo crate that shows the pipeline.\n\n\n\n"
            "## Usage\n\nSee [the guide](./GUIDE.md) first, then:\n\n" + fenced("rust", "use demo::Thing;")
        )
        parsed = ReadmeParser.parse(readme, include_examples=True)

        assert parsed.description == "A demo crate that shows the pipeline."
        assert "./GUIDE.md" not in parsed.cleaned_body
        assert "\n\n\n" not in parsed.cleaned_body
        assert len(parsed.examples) == 1
        assert parsed.examples[0].description == "See [the guide](./GUIDE.md) first, then:"

    def test_example_serialization_omits_missing_description(self):
        parsed = ReadmeParser.parse("## Usage\n\n" + fenced("bash", "cargo add demo"))

        assert parsed.examples[0].to_dict() == {
            "title": "Installation",
            "code": "cargo add demo",
            "language": "bash",
        }
