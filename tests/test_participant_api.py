"""Participant API tests — browsing, submitting, history.

Learn: The `quiz` fixture's answer key is [0, 2, 1]. Answer maps go over
the wire as JSON objects, so question ids are string keys in requests
and responses.
"""

import pytest


def auth_headers(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def _answers(quiz, picks):
    return {str(q["id"]): pick for q, pick in zip(quiz["questions"], picks)}


async def _submit(client, headers, quiz_id, answers, **extra):
    return await client.post(
        "/api/quiz/submit",
        json={"quizId": quiz_id, "selectedAnswers": answers, **extra},
        headers=headers,
    )


# ═══════════════════════════════════════════════════════════
# Browsing
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_list_only_published_quizzes(client, quiz, owner_headers, taker_headers):
    await client.post("/api/admin/quiz", json={"title": "Draft"}, headers=owner_headers)

    r = await client.get("/api/quizzes", headers=taker_headers)
    assert r.status_code == 200
    assert [q["title"] for q in r.json()] == ["Capitals"]


@pytest.mark.asyncio
async def test_owner_cannot_browse_as_taker(client, quiz, owner_headers):
    r = await client.get("/api/quizzes", headers=owner_headers)
    assert r.status_code == 403


@pytest.mark.asyncio
async def test_quiz_detail_hides_answer_keys(client, quiz, taker_headers):
    r = await client.get(f"/api/quiz/{quiz['id']}", headers=taker_headers)
    assert r.status_code == 200
    body = r.json()
    assert body["title"] == "Capitals"
    assert [q["text"] for q in body["questions"]] == [
        "Capital of France?",
        "Capital of Norway?",
        "Capital of Italy?",
    ]
    for question in body["questions"]:
        assert "correctIndex" not in question


@pytest.mark.asyncio
async def test_quiz_detail_not_found(client, taker_headers):
    r = await client.get("/api/quiz/9999", headers=taker_headers)
    assert r.status_code == 404
    assert r.json()["code"] == "NOT_FOUND"


# ═══════════════════════════════════════════════════════════
# Submission
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_submit_is_scored_on_the_server(client, quiz, taker, taker_headers):
    r = await _submit(client, taker_headers, quiz["id"], _answers(quiz, [0, 2, 0]), timeSpent=95)
    assert r.status_code == 201
    body = r.json()
    assert body["score"] == 2
    assert body["totalQuestions"] == 3
    assert body["percentage"] == pytest.approx(200 / 3)
    assert body["takerId"] == taker["id"]
    assert body["quizTitle"] == "Capitals"
    assert body["timeSpent"] == 95


@pytest.mark.asyncio
async def test_client_supplied_score_is_ignored(client, quiz, taker_headers):
    r = await _submit(
        client, taker_headers, quiz["id"], _answers(quiz, [1, 1, 0]), score=100, totalQuestions=1
    )
    assert r.status_code == 201
    assert r.json()["score"] == 0
    assert r.json()["totalQuestions"] == 3


@pytest.mark.asyncio
async def test_unknown_question_ids_are_dropped(client, quiz, taker_headers):
    answers = _answers(quiz, [0, 2, 1])
    answers["99999"] = 0
    r = await _submit(client, taker_headers, quiz["id"], answers)
    assert r.status_code == 201
    assert r.json()["score"] == 3
    assert "99999" not in r.json()["selectedAnswers"]


@pytest.mark.asyncio
async def test_submit_with_no_answers(client, quiz, taker_headers):
    r = await _submit(client, taker_headers, quiz["id"], {})
    assert r.status_code == 201
    assert r.json()["score"] == 0
    assert r.json()["totalQuestions"] == 3
    assert r.json()["percentage"] == 0.0


@pytest.mark.asyncio
async def test_submit_with_non_integer_answer(client, quiz, taker_headers):
    r = await _submit(client, taker_headers, quiz["id"], {"abc": 1})
    assert r.status_code == 400
    assert r.json()["code"] == "VALIDATION_ERROR"


@pytest.mark.asyncio
async def test_submit_to_missing_quiz(client, taker_headers):
    r = await _submit(client, taker_headers, 9999, {})
    assert r.status_code == 404
    assert r.json()["message"] == "Quiz not found"


@pytest.mark.asyncio
async def test_owner_cannot_submit(client, quiz, owner_headers):
    r = await _submit(client, owner_headers, quiz["id"], {})
    assert r.status_code == 403


@pytest.mark.asyncio
async def test_anonymous_cannot_submit(client, quiz):
    r = await client.post("/api/quiz/submit", json={"quizId": quiz["id"], "selectedAnswers": {}})
    assert r.status_code == 401


@pytest.mark.asyncio
async def test_duplicate_submissions_are_separate_attempts(client, quiz, taker_headers):
    answers = _answers(quiz, [0, 2, 1])
    r1 = await _submit(client, taker_headers, quiz["id"], answers)
    r2 = await _submit(client, taker_headers, quiz["id"], answers)
    assert r1.json()["id"] != r2.json()["id"]

    r = await client.get("/api/user/history", headers=taker_headers)
    assert len(r.json()) == 2


@pytest.mark.asyncio
async def test_attempt_is_unchanged_by_later_quiz_edits(client, quiz, owner_headers, taker_headers):
    r = await _submit(client, taker_headers, quiz["id"], _answers(quiz, [0, 2, 1]))
    attempt_id = r.json()["id"]

    await client.post(
        "/api/admin/question",
        json={"quizId": quiz["id"], "text": "New", "options": ["a", "b"], "correctIndex": 0},
        headers=owner_headers,
    )
    await client.delete(f"/api/admin/question/{quiz['questions'][0]['id']}", headers=owner_headers)

    r = await client.get(f"/api/attempt/{attempt_id}", headers=taker_headers)
    assert r.status_code == 200
    assert r.json()["score"] == 3
    assert r.json()["totalQuestions"] == 3
    assert r.json()["percentage"] == 100.0


# ═══════════════════════════════════════════════════════════
# History and attempts
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_history_newest_first_and_private(client, quiz, register, taker_headers):
    first = await _submit(client, taker_headers, quiz["id"], _answers(quiz, [0, 0, 0]))
    second = await _submit(client, taker_headers, quiz["id"], _answers(quiz, [0, 2, 1]))

    someone = await register("TAKER")
    await _submit(client, auth_headers(someone["token"]), quiz["id"], {})

    r = await client.get("/api/user/history", headers=taker_headers)
    assert r.status_code == 200
    assert [a["id"] for a in r.json()] == [second.json()["id"], first.json()["id"]]


@pytest.mark.asyncio
async def test_attempt_visible_only_to_its_taker(client, quiz, register, taker_headers):
    r = await _submit(client, taker_headers, quiz["id"], _answers(quiz, [0, 2, 1]))
    attempt_id = r.json()["id"]

    r = await client.get(f"/api/attempt/{attempt_id}", headers=taker_headers)
    assert r.status_code == 200
    assert r.json()["selectedAnswers"] == _answers(quiz, [0, 2, 1])

    someone = await register("TAKER")
    r = await client.get(f"/api/attempt/{attempt_id}", headers=auth_headers(someone["token"]))
    assert r.status_code == 401
    assert r.json()["code"] == "UNAUTHORIZED"


@pytest.mark.asyncio
async def test_attempt_not_found(client, taker_headers):
    r = await client.get("/api/attempt/9999", headers=taker_headers)
    assert r.status_code == 404
    assert r.json()["message"] == "Attempt not found"


# ═══════════════════════════════════════════════════════════
# Out-of-range ids
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_submit_with_oversized_quiz_id(client, taker_headers):
    r = await _submit(client, taker_headers, 2**70, {})
    assert r.status_code == 400
    assert r.json()["code"] == "VALIDATION_ERROR"
    assert "quizId" in r.json()["errors"]


@pytest.mark.asyncio
async def test_submit_with_oversized_time_spent(client, quiz, taker_headers):
    r = await _submit(client, taker_headers, quiz["id"], {}, timeSpent=2**63)
    assert r.status_code == 400
    assert r.json()["code"] == "VALIDATION_ERROR"


@pytest.mark.asyncio
@pytest.mark.parametrize("path", ["/api/quiz/{}", "/api/attempt/{}"])
@pytest.mark.parametrize("bad_id", [2**70, 0, -1])
async def test_out_of_range_path_ids(client, taker_headers, path, bad_id):
    r = await client.get(path.format(bad_id), headers=taker_headers)
    assert r.status_code == 400
    assert r.json()["code"] == "VALIDATION_ERROR"
