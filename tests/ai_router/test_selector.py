"""Tests for ModelCatalog and ModelSelector.

Tests cover:
- Default catalog contents and id uniqueness
- get_available_models() is idempotent
- Task-type filtering and empty results
- Cost ceiling filtering against the 1K-token reference estimate
- Ordering per priority mode (speed, cost, quality, balanced)
"""

from __future__ import annotations

import pytest

from src.ai_router import (
    DEFAULT_MODELS,
    ModelCatalog,
    ModelSelector,
    PriorityMode,
    ProviderName,
    TaskType,
    estimate_reference_cost,
)
from tests.conftest import make_descriptor


# ------------------------------------------------------------------ #
# ModelCatalog tests
# ------------------------------------------------------------------ #


def test_default_catalog_has_every_provider():
    catalog = ModelCatalog()

    assert len(catalog) == len(DEFAULT_MODELS) == 4
    assert catalog.providers() == {ProviderName.GROQ, ProviderName.GEMINI, ProviderName.AIMLAPI}
    assert catalog.get("llama-3.3-70b-versatile").priority == 1
    assert catalog.get("nonexistent") is None


def test_catalog_rejects_duplicate_ids():
    dup = make_descriptor("dup", ProviderName.GROQ, priority=1, cost_in=1, cost_out=1)

    with pytest.raises(ValueError, match="Duplicate model id"):
        ModelCatalog([dup, dup])


def test_get_available_models_is_idempotent():
    catalog = ModelCatalog()

    first = catalog.get_available_models()
    second = catalog.get_available_models()

    assert first == second
    assert [m.id for m in first] == [m.id for m in DEFAULT_MODELS]


# ------------------------------------------------------------------ #
# ModelSelector tests
# ------------------------------------------------------------------ #


def test_unknown_task_type_returns_empty_list(chat_catalog):
    selector = ModelSelector(chat_catalog)

    assert selector.select_models(TaskType.AUDIO, PriorityMode.BALANCED) == []


def test_filters_by_task_type():
    selector = ModelSelector(ModelCatalog())

    vision = selector.select_models(TaskType.VISION, PriorityMode.SPEED)
    code = selector.select_models(TaskType.CODE, PriorityMode.SPEED)

    assert [m.id for m in vision] == ["gemini-2.0-flash-exp"]
    assert [m.id for m in code] == ["gpt-3.5-turbo", "claude-3-haiku-20240307"]


@pytest.mark.parametrize("priority", [PriorityMode.SPEED, PriorityMode.BALANCED])
def test_speed_and_balanced_order_by_ascending_rank(priority):
    selector = ModelSelector(ModelCatalog())

    ranks = [m.priority for m in selector.select_models(TaskType.CHAT, priority)]

    assert ranks == sorted(ranks)
    assert ranks == [1, 2, 3, 4]


def test_cost_orders_by_combined_rate():
    selector = ModelSelector(ModelCatalog())

    models = selector.select_models(TaskType.CHAT, PriorityMode.COST)
    combined = [m.cost_per_million.input + m.cost_per_million.output for m in models]

    assert combined == sorted(combined)
    assert models[0].id == "gemini-2.0-flash-exp"


def test_quality_is_exact_inverse_of_speed():
    selector = ModelSelector(ModelCatalog())

    speed = selector.select_models(TaskType.CHAT, PriorityMode.SPEED)
    quality = selector.select_models(TaskType.CHAT, PriorityMode.QUALITY)

    assert [m.priority for m in quality] == [4, 3, 2, 1]
    assert [m.id for m in quality] == [m.id for m in reversed(speed)]


def test_reference_cost_uses_thousand_tokens():
    model = make_descriptor("m", ProviderName.GROQ, priority=1, cost_in=1.0, cost_out=2.0)

    assert estimate_reference_cost(model) == pytest.approx(0.003)


def test_max_cost_drops_expensive_models(chat_catalog):
    selector = ModelSelector(chat_catalog)

    # model-a costs 0.003 per 1K tokens, model-c 0.0015, model-b 0.0003
    models = selector.select_models(TaskType.CHAT, PriorityMode.SPEED, max_cost_per_request=0.002)

    assert [m.id for m in models] == ["model-b", "model-c"]


def test_max_cost_can_exclude_everything(chat_catalog):
    selector = ModelSelector(chat_catalog)

    assert selector.select_models(TaskType.CHAT, PriorityMode.COST, max_cost_per_request=0.0) == []


def test_equal_ranks_keep_catalog_order():
    catalog = ModelCatalog(
        [
            make_descriptor("first", ProviderName.GROQ, priority=1, cost_in=1, cost_out=1),
            make_descriptor("second", ProviderName.GEMINI, priority=1, cost_in=1, cost_out=1),
        ]
    )
    selector = ModelSelector(catalog)

    for priority in PriorityMode:
        ids = [m.id for m in selector.select_models(TaskType.CHAT, priority)]
        assert ids == ["first", "second"]
