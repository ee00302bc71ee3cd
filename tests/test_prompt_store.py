from __future__ import annotations

import pytest

from app.services.prompt_store import render_prompt


def test_render_prompt_substitutes_template_values():
    prompt = render_prompt(
        "live_events.user_prompt",
        query="Lakers",
        today_iso="2026-02-21",
        search_context="[1] Title: Game",
    )
    assert 'User searched for: "Lakers"' in prompt
    assert "2026-02-21" in prompt
    assert "[1] Title: Game" in prompt


def test_render_prompt_raises_for_unknown_key():
    with pytest.raises(KeyError):
        render_prompt("missing.prompt.key")


def test_render_prompt_reports_missing_values():
    with pytest.raises(KeyError, match="today_iso"):
        render_prompt("live_events.system_prompt")
