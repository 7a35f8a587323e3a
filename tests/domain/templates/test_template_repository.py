"""TemplateRepository の永続化形式のテスト。"""

from __future__ import annotations

import json
from pathlib import Path
import sys

import pytest

SRC_ROOT = Path(__file__).resolve().parents[3] / "src"
if str(SRC_ROOT) not in sys.path:
    sys.path.insert(0, str(SRC_ROOT))

from wheelpick.domain.templates.models import SCHEMA_VERSION, Option, Template  # noqa: E402
from wheelpick.domain.templates.repository import (  # noqa: E402
    CURRENT_TEMPLATE_KEY,
    HIDE_PICKED_KEY,
    TEMPLATES_KEY,
    TemplateRepository,
)
from wheelpick.infrastructure.settings import InMemoryKeyValueStore  # noqa: E402


@pytest.fixture()
def store() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture()
def repository(store: InMemoryKeyValueStore) -> TemplateRepository:
    return TemplateRepository(store)


def test_missing_keys_read_as_defaults(repository: TemplateRepository) -> None:
    assert repository.load_templates() == []
    assert repository.current_template_id() == ""
    assert repository.hide_picked_enabled() is False


@pytest.mark.parametrize(
    "raw",
    [
        "{not json",
        "42",
        '"text"',
        '{"version": 99, "templates": []}',
        '{"templates": [{"id": "tpl_1", "name": "x"}]}',
        '{"version": 1, "templates": "nope"}',
    ],
)
def test_corrupt_blob_reads_as_empty(
    store: InMemoryKeyValueStore, repository: TemplateRepository, raw: str
) -> None:
    store.set_item(TEMPLATES_KEY, raw)

    assert repository.load_templates() == []


def test_legacy_array_blob_is_accepted_and_upgraded(
    store: InMemoryKeyValueStore, repository: TemplateRepository
) -> None:
    legacy = [
        {
            "id": "tpl_1",
            "name": "Default",
            "options": [{"id": "opt_1", "label": "Option 1", "type": "text"}],
        }
    ]
    store.set_item(TEMPLATES_KEY, json.dumps(legacy))

    templates = repository.load_templates()
    assert templates == [
        Template(id="tpl_1", name="Default", options=[Option(id="opt_1", label="Option 1")])
    ]

    repository.save_templates(templates)
    payload = json.loads(store.get_item(TEMPLATES_KEY) or "")
    assert payload["version"] == SCHEMA_VERSION
    assert payload["templates"][0]["hiddenOptionIds"] == []


def test_flags_are_stored_as_strings(
    store: InMemoryKeyValueStore, repository: TemplateRepository
) -> None:
    repository.set_hide_picked_enabled(True)
    repository.set_current_template_id("tpl_9")

    assert store.get_item(HIDE_PICKED_KEY) == "true"
    assert store.get_item(CURRENT_TEMPLATE_KEY) == "tpl_9"
    assert repository.hide_picked_enabled() is True

    repository.set_hide_picked_enabled(False)
    repository.set_current_template_id(None)
    assert store.get_item(HIDE_PICKED_KEY) == "false"
    assert repository.hide_picked_enabled() is False
    assert repository.current_template_id() == ""


def test_unexpected_flag_value_is_false(
    store: InMemoryKeyValueStore, repository: TemplateRepository
) -> None:
    store.set_item(HIDE_PICKED_KEY, "yes")

    assert repository.hide_picked_enabled() is False
