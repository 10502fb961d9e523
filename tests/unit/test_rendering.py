"""Unit tests for the slogan prompt template, message rendering and markdown."""

import pytest

from sloganchat.generation.prompts import (
    SLOGAN_PROMPT_PREFIX,
    SLOGAN_PROMPT_SUFFIX,
    build_slogan_prompt,
    strip_slogan_prompt,
)
from sloganchat.models.schemas import Message, Role
from sloganchat.ui.markdown import markdown_to_html
from sloganchat.ui.rendering import render_message, render_pending


class TestSloganPrompt:
    """Tests for wrapping and unwrapping the first-exchange template."""

    def test_wraps_product_keyword(self) -> None:
        prompt = build_slogan_prompt("炸鸡")

        assert prompt.startswith(SLOGAN_PROMPT_PREFIX)
        assert prompt.endswith(SLOGAN_PROMPT_SUFFIX)
        assert '"炸鸡"' in prompt
        assert "5个新广告文案" in prompt

    def test_strip_recovers_keyword(self) -> None:
        assert strip_slogan_prompt(build_slogan_prompt("KFC 七夕")) == "KFC 七夕"

    def test_strip_leaves_plain_text_alone(self) -> None:
        assert strip_slogan_prompt("再来五个") == "再来五个"


class TestRenderMessage:
    """Tests for the message to markup adapter."""

    def test_first_message_hides_template(self) -> None:
        """Only the product keyword of the templated prompt is shown."""
        message = Message(role=Role.USER, content=build_slogan_prompt("炸鸡"))

        html = render_message(message, is_first_user_message=True)

        assert html == "炸鸡"

    def test_later_messages_render_verbatim(self) -> None:
        """Template text in a later message is not stripped."""
        content = build_slogan_prompt("炸鸡")
        message = Message(role=Role.USER, content=content)

        html = render_message(message, is_first_user_message=False)

        assert html == content.replace('"', "&quot;")

    def test_uses_injected_markdown_renderer(self) -> None:
        message = Message(role=Role.ASSISTANT, content="**bold**")

        html = render_message(message, markdown=lambda text: f"<p>{text}</p>")

        assert html == "<p>**bold**</p>"

    def test_render_pending_tolerates_partial_markdown(self) -> None:
        """Unbalanced syntax mid-stream renders without raising."""
        for partial in ["**Buy", "```py\nprint(", "[link](http://", "1. one\n2."]:
            assert isinstance(render_pending(partial), str)

    def test_rendering_is_repeatable(self) -> None:
        message = Message(role=Role.ASSISTANT, content="- one\n- two")

        assert render_message(message) == render_message(message)


class TestMarkdownToHtml:
    """Tests for the default markdown converter."""

    def test_escapes_html(self) -> None:
        html = markdown_to_html("<script>alert(1)</script>")

        assert "<script>" not in html
        assert "&lt;script&gt;" in html

    @pytest.mark.parametrize(
        ("markdown", "expected"),
        [
            ("**bold**", "<strong>bold</strong>"),
            ("*italic*", "<em>italic</em>"),
            ("# Title", "<h1"),
            ("[KFC](https://kfc.com)", 'href="https://kfc.com"'),
            ("`code`", "<code"),
        ],
    )
    def test_inline_syntax(self, markdown: str, expected: str) -> None:
        assert expected in markdown_to_html(markdown)

    def test_lists(self) -> None:
        html = markdown_to_html("- 香脆\n- 多汁\n\n1. 第一\n2. 第二")

        assert html.count("<li>") == 4
        assert "<ul" in html and "</ul>" in html
        assert "<ol" in html and "</ol>" in html

    def test_fenced_code_keeps_language_and_lines(self) -> None:
        html = markdown_to_html("```python\nx = 1\ny = 2\n```")

        assert 'class="language-python"' in html
        assert "x = 1&#10;y = 2" in html

    def test_unclosed_fence_runs_to_end(self) -> None:
        html = markdown_to_html("text\n```js\nconst a")

        assert "<pre" in html
        assert "const a" in html

    def test_newlines_become_breaks(self) -> None:
        assert markdown_to_html("一\n二") == "一<br>二"

    def test_quotes_cannot_break_out_of_href(self) -> None:
        html = markdown_to_html('[x](http://a"onmouseover="alert(1))')

        assert 'onmouseover="' not in html
        assert "&quot;onmouseover=&quot;" in html

    @pytest.mark.parametrize(
        "url",
        ["javascript:alert(1)", "JavaScript:alert(1)", "data:text/html,hi", "vbscript:x"],
    )
    def test_unsafe_link_scheme_renders_label_only(self, url: str) -> None:
        html = markdown_to_html(f"[点我]({url})")

        assert "<a" not in html
        assert "href" not in html
        assert html.startswith("点我")

    def test_mailto_link_is_kept(self) -> None:
        html = markdown_to_html("[mail](mailto:ads@example.com)")

        assert 'href="mailto:ads@example.com"' in html

    def test_code_is_not_formatted(self) -> None:
        """Emphasis and link syntax inside code stays literal."""
        html = markdown_to_html(
            "call `f(**kwargs)` then\n```py\ndef f(*args, **kwargs):\n    # [a](http://b)\n```"
        )

        assert "<strong>" not in html
        assert "<em>" not in html
        assert "<a " not in html
        assert "f(**kwargs)" in html
        assert "def f(*args, **kwargs):" in html
        assert "<h1" not in html

    def test_formatting_outside_code_still_applies(self) -> None:
        html = markdown_to_html("**香脆** `x_y_z` _多汁_")

        assert "<strong>香脆</strong>" in html
        assert "<em>多汁</em>" in html
        assert "x_y_z</code>" in html

    def test_nul_characters_in_input_are_dropped(self) -> None:
        assert markdown_to_html("a\x000\x00b") == "a0b"
