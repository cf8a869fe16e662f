"""Userscript template and the markers the codec relies on."""
from __future__ import annotations

import re
from pathlib import Path
from typing import Final, Pattern

URL_PLACEHOLDER: Final[str] = "{{URL_MATCH}}"
OPTIONS_PLACEHOLDER: Final[str] = "{{OPTIONS}}"

# The string literal is matched escape-aware so ``\'`` inside it does not end the block.
OPTIONS_ANCHOR: Final[Pattern[str]] = re.compile(
    r"QUICK_REPLY_OPTIONS\s*=\s*JSON\.parse\(\s*'(?P<options>(?:\\.|[^'\\])*)'\s*\)",
    re.DOTALL,
)
MATCH_DIRECTIVE: Final[Pattern[str]] = re.compile(
    r"^//\s*@match\s+(?P<url>\S+)\s*$", re.MULTILINE
)

DEFAULT_TEMPLATE: Final[str] = """\
// ==UserScript==
// @name         Support ticket quick replies
// @namespace    quickreply
// @version      1.0
// @description  Adds configurable quick-reply buttons to the support ticket page
// @match        {{URL_MATCH}}
// @grant        none
// ==/UserScript==

(function () {
    'use strict';

    const QUICK_REPLY_OPTIONS = JSON.parse('{{OPTIONS}}');

    function snippetFor(option) {
        if (option.type === 'custom') {
            return option.text;
        }
        const source = document.getElementById(option.id);
        return source ? (source.value || source.textContent || '') : '';
    }

    function insertReply(text) {
        const target = document.getElementById('replymessage');
        if (!target) {
            return;
        }
        const start = target.selectionStart || 0;
        const end = target.selectionEnd || 0;
        target.value = target.value.slice(0, start) + text + target.value.slice(end);
        target.focus();
    }

    function renderButtons() {
        const target = document.getElementById('replymessage');
        if (!target) {
            return;
        }
        const bar = document.createElement('div');
        bar.className = 'quick-reply-bar';
        QUICK_REPLY_OPTIONS.forEach(function (option) {
            const button = document.createElement('button');
            button.type = 'button';
            button.textContent = option.name;
            button.style.backgroundColor = option.colour;
            button.addEventListener('click', function () {
                insertReply(snippetFor(option));
            });
            bar.appendChild(button);
        });
        target.parentNode.insertBefore(bar, target);
    }

    renderButtons();
})();
"""


def render_template(template: str, *, url_match: str, options_literal: str) -> str:
    """Substitute both placeholders at every occurrence in ``template``."""

    rendered = template.replace(URL_PLACEHOLDER, url_match)
    return rendered.replace(OPTIONS_PLACEHOLDER, options_literal)


def load_template(template_path: Path) -> str:
    """Read a custom template, insisting both placeholders are present."""

    text = template_path.read_text(encoding="utf-8")
    missing = [
        token for token in (URL_PLACEHOLDER, OPTIONS_PLACEHOLDER) if token not in text
    ]
    if missing:
        raise ValueError(
            f"template {template_path} is missing placeholders: " + ", ".join(missing)
        )
    return text


__all__ = [
    "DEFAULT_TEMPLATE",
    "MATCH_DIRECTIVE",
    "OPTIONS_ANCHOR",
    "OPTIONS_PLACEHOLDER",
    "URL_PLACEHOLDER",
    "load_template",
    "render_template",
]
