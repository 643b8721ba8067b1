"""Command router tests covering payload validation and tagged failures.

Updates: v0.2.1 - 2026-10-18 - Cover 64-bit bounds, UTF-8 text, and blank content.
Updates: v0.2.0 - 2026-10-04 - Cover restore, render, and usage history commands.
Updates: v0.1.0 - 2026-09-28 - Cover the core command contract.
"""

from __future__ import annotations

import json

import pytest

from core import MalformedInputError, PromptCommandRouter


def _upsert(router: PromptCommandRouter, **fields: object) -> dict:
    payload = {"title": "T", "content": "C1", "tags": ["x", "X"], **fields}
    response = router.dispatch("upsert_prompt", input=payload)
    assert response.ok, response.error
    return response.data


def test_upsert_creates_prompt_payload(router: PromptCommandRouter) -> None:
    prompt = _upsert(router, isFavorite=True)
    assert prompt["tags"] == ["x"]
    assert prompt["isFavorite"] is True
    assert prompt["scoreCount"] == 0
    assert set(prompt) == {
        "id",
        "title",
        "content",
        "tags",
        "isFavorite",
        "scoreAvg",
        "scoreCount",
        "createdAt",
        "updatedAt",
    }


def test_upsert_trims_and_rejects_blank_titles(router: PromptCommandRouter) -> None:
    assert _upsert(router, title="  Spaced  ")["title"] == "Spaced"
    response = router.dispatch("upsert_prompt", input={"title": "  ", "content": "C"})
    assert not response.ok
    assert response.error is not None
    assert response.error.kind == "MalformedInput"


def test_upsert_with_id_updates_and_records_version(router: PromptCommandRouter) -> None:
    prompt = _upsert(router)
    updated = router.dispatch(
        "upsert_prompt",
        input={"id": prompt["id"], "title": "T", "content": "C2", "changeNote": "edit"},
    )
    assert updated.ok
    versions = router.dispatch("list_prompt_versions", promptId=prompt["id"]).data
    assert [version["content"] for version in versions] == ["C1"]
    assert versions[0]["changeNote"] == "edit"


def test_upsert_unknown_id_is_not_found(router: PromptCommandRouter) -> None:
    response = router.dispatch("upsert_prompt", input={"id": 999, "title": "T", "content": "C"})
    assert response.error is not None
    assert response.error.kind == "NotFound"


def test_get_prompt_returns_null_for_missing(router: PromptCommandRouter) -> None:
    response = router.dispatch("get_prompt", id=123)
    assert response.ok
    assert response.data is None


def test_list_prompts_with_filters_and_sort(router: PromptCommandRouter) -> None:
    first = _upsert(router, title="Foo", tags=["work"])
    _upsert(router, title="Bar", tags=["home"])
    response = router.dispatch("list_prompts", search="foo", tag="WORK", sortBy="score")
    assert response.ok
    assert [prompt["id"] for prompt in response.data] == [first["id"]]

    bad = router.dispatch("list_prompts", sortBy="random")
    assert bad.error is not None
    assert bad.error.kind == "MalformedInput"


def test_list_tags_payload(router: PromptCommandRouter) -> None:
    _upsert(router, tags=["x", "y"])
    _upsert(router, tags=["X"])
    assert router.dispatch("list_tags").data == [
        {"name": "x", "count": 2},
        {"name": "y", "count": 1},
    ]


def test_log_usage_updates_scores_and_returns_null(router: PromptCommandRouter) -> None:
    prompt = _upsert(router)
    for rating in (4, 2, None):
        response = router.dispatch(
            "log_prompt_usage",
            input={
                "promptId": prompt["id"],
                "inputVars": {"name": "Ada"},
                "outputText": "out",
                "rating": rating,
            },
        )
        assert response.ok
        assert response.data is None
    stored = router.dispatch("get_prompt", id=prompt["id"]).data
    assert stored["scoreCount"] == 2
    assert stored["scoreAvg"] == pytest.approx(3.0)
    usage = router.dispatch("list_prompt_usage", promptId=prompt["id"]).data
    assert len(usage) == 3
    assert usage[0]["inputVars"] == {"name": "Ada"}


@pytest.mark.parametrize("rating", [0, 6, "5", 2.5])
def test_log_usage_rejects_bad_ratings(router: PromptCommandRouter, rating: object) -> None:
    prompt = _upsert(router)
    response = router.dispatch(
        "log_prompt_usage",
        input={"promptId": prompt["id"], "outputText": "o", "rating": rating},
    )
    assert response.error is not None
    assert response.error.kind == "MalformedInput"


def test_log_usage_unknown_prompt_is_not_found(router: PromptCommandRouter) -> None:
    response = router.dispatch(
        "log_prompt_usage",
        input={"promptId": 5, "outputText": "o", "rating": 3},
    )
    assert response.error is not None
    assert response.error.kind == "NotFound"


def test_delete_then_queries_return_empty(router: PromptCommandRouter) -> None:
    prompt = _upsert(router)
    router.dispatch("upsert_prompt", input={"id": prompt["id"], "title": "T", "content": "C2"})
    assert router.dispatch("delete_prompt", id=prompt["id"]).ok
    assert router.dispatch("list_prompts").data == []
    assert router.dispatch("list_prompt_versions", promptId=prompt["id"]).data == []
    assert router.dispatch("list_prompt_usage", promptId=prompt["id"]).data == []
    again = router.dispatch("delete_prompt", id=prompt["id"])
    assert again.error is not None
    assert again.error.kind == "NotFound"


def test_export_import_round_trip(router: PromptCommandRouter) -> None:
    _upsert(router, title="One")
    _upsert(router, title="Two")
    document = router.dispatch("export_prompts_json").data
    assert isinstance(document, str)
    assert json.loads(document)["formatVersion"] == 1

    response = router.dispatch("import_prompts_json", jsonData=document)
    assert response.data == {"imported": 2}
    assert len(router.dispatch("list_prompts").data) == 4


def test_import_malformed_document(router: PromptCommandRouter) -> None:
    response = router.dispatch("import_prompts_json", jsonData="{broken")
    assert response.error is not None
    assert response.error.kind == "MalformedInput"


def test_restore_and_render_commands(router: PromptCommandRouter) -> None:
    prompt = _upsert(router, content="Hi {{name}}")
    router.dispatch(
        "upsert_prompt",
        input={"id": prompt["id"], "title": "T", "content": "Bye {{ name }} {{when}}"},
    )
    rendered = router.dispatch("render_prompt", id=prompt["id"], values={"name": "Ada"}).data
    assert rendered == {
        "renderedText": "Bye Ada {{when}}",
        "missingVariables": ["when"],
        "variables": ["name", "when"],
    }

    version = router.dispatch("list_prompt_versions", promptId=prompt["id"]).data[0]
    restored = router.dispatch("restore_prompt_version", versionId=version["id"]).data
    assert restored["content"] == "Hi {{name}}"


def test_invalid_arguments_are_malformed(router: PromptCommandRouter) -> None:
    for name, arguments in (
        ("get_prompt", {}),
        ("get_prompt", {"id": "1"}),
        ("get_prompt", {"id": True}),
        ("delete_prompt", {"id": 1, "extra": 2}),
        ("upsert_prompt", {"input": {"title": "T"}}),
        ("list_tags", {"unexpected": True}),
    ):
        response = router.dispatch(name, **arguments)
        assert response.error is not None, name
        assert response.error.kind == "MalformedInput"


@pytest.mark.parametrize(
    ("name", "arguments"),
    [
        ("get_prompt", {"id": 2**64}),
        ("delete_prompt", {"id": -(2**63) - 1}),
        ("list_prompt_versions", {"promptId": 2**63}),
        ("restore_prompt_version", {"versionId": 2**70}),
        ("upsert_prompt", {"input": {"id": 2**64, "title": "T", "content": "C"}}),
        ("log_prompt_usage", {"input": {"promptId": 2**64}}),
    ],
)
def test_integers_beyond_64_bits_are_malformed(
    router: PromptCommandRouter,
    name: str,
    arguments: dict,
) -> None:
    response = router.dispatch(name, **arguments)
    assert response.error is not None
    assert response.error.kind == "MalformedInput"


@pytest.mark.parametrize(
    "fields",
    [
        {"title": "bad \ud800 title"},
        {"content": "bad \udfff content"},
        {"tags": ["ok", "\ud800"]},
        {"changeNote": "\ud800"},
    ],
)
def test_upsert_rejects_text_that_is_not_utf8(
    router: PromptCommandRouter,
    fields: dict,
) -> None:
    payload = {"title": "T", "content": "C", **fields}
    response = router.dispatch("upsert_prompt", input=payload)
    assert response.error is not None
    assert response.error.kind == "MalformedInput"
    assert router.dispatch("list_prompts").data == []


def test_upsert_rejects_blank_content(router: PromptCommandRouter) -> None:
    response = router.dispatch("upsert_prompt", input={"title": "T", "content": " \n\t "})
    assert response.error is not None
    assert response.error.kind == "MalformedInput"
    assert "content must not be blank" in response.error.message

    prompt = _upsert(router)
    edit = router.dispatch(
        "upsert_prompt",
        input={"id": prompt["id"], "title": "T", "content": ""},
    )
    assert edit.error is not None
    assert edit.error.kind == "MalformedInput"
    assert router.dispatch("get_prompt", id=prompt["id"]).data["content"] == "C1"


def test_import_rejects_unbindable_values(router: PromptCommandRouter) -> None:
    for document in (
        '{"prompts": [{"title": "T", "content": "bad \\ud800 text"}]}',
        json.dumps({"prompts": [{"title": "T", "content": "C", "scoreCount": 2**70}]}),
    ):
        response = router.dispatch("import_prompts_json", jsonData=document)
        assert response.error is not None, document
        assert response.error.kind == "MalformedInput"
    assert router.dispatch("list_prompts").data == []

def test_unknown_command(router: PromptCommandRouter) -> None:
    response = router.dispatch("drop_everything")
    assert response.error is not None
    assert response.error.kind == "MalformedInput"
    with pytest.raises(MalformedInputError):
        router.call("drop_everything")


def test_response_envelope_payload(router: PromptCommandRouter) -> None:
    ok = router.dispatch_payload("list_tags")
    assert ok == {"ok": True, "data": []}
    failed = router.dispatch_payload("get_prompt", {"id": "x"})
    assert failed["ok"] is False
    assert failed["error"]["kind"] == "MalformedInput"
    assert "list_prompts" in router.command_names
