import json

from palletwms.services import ai_planner
from palletwms.services.ai_planner import suggest_storage_slot

FREE = ["R1.01.001", "R1.01.002", "R2.01.001"]


def _fake_reply(text):
    calls = []

    def fake(**kwargs):
        calls.append(kwargs)
        return text

    return fake, calls


def test_no_api_key_means_no_suggestion(monkeypatch):
    fake, calls = _fake_reply('{"suggestedPosition": "R1.01.001"}')
    monkeypatch.setattr(ai_planner, "_chat_complete", fake)
    assert suggest_storage_slot("Açúcar", "Sacaria", FREE) is None
    assert calls == []


def test_no_free_slots(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    fake, calls = _fake_reply('{"suggestedPosition": "R1.01.001"}')
    monkeypatch.setattr(ai_planner, "_chat_complete", fake)
    assert suggest_storage_slot("Açúcar", "Sacaria", []) is None
    assert calls == []


def test_valid_answer(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    fake, calls = _fake_reply('{"suggestedPosition": "R1.01.002", "reason": "heavy, low level"}')
    monkeypatch.setattr(ai_planner, "_chat_complete", fake)

    s = suggest_storage_slot("Açúcar 50kg", "Sacaria", FREE, model="gpt-test")
    assert s.suggested_position == "R1.01.002"
    assert s.reason == "heavy, low level"
    assert calls[0]["model"] == "gpt-test"
    assert "R2.01.001" in calls[0]["user"]


def test_fenced_answer_is_parsed(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    fake, _ = _fake_reply('```json\n{"suggested_position": "R2.01.001"}\n```')
    monkeypatch.setattr(ai_planner, "_chat_complete", fake)
    assert suggest_storage_slot("Leite", "Leite", FREE).suggested_position == "R2.01.001"


def test_position_outside_free_list_is_discarded(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    fake, _ = _fake_reply('{"suggestedPosition": "R9.99.999"}')
    monkeypatch.setattr(ai_planner, "_chat_complete", fake)
    assert suggest_storage_slot("Leite", "Leite", FREE) is None


def test_garbage_answer(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    fake, _ = _fake_reply("I think the first aisle is best.")
    monkeypatch.setattr(ai_planner, "_chat_complete", fake)
    assert suggest_storage_slot("Leite", "Leite", FREE) is None


def test_api_error_is_swallowed_and_traced(monkeypatch, tmp_path):
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    log_path = tmp_path / "ai_planner.jsonl"

    def boom(**kwargs):
        raise TimeoutError("model timed out")

    monkeypatch.setattr(ai_planner, "_chat_complete", boom)
    assert suggest_storage_slot("Leite", "Leite", FREE) is None

    events = [json.loads(line)["event"] for line in log_path.read_text(encoding="utf-8").splitlines()]
    assert events == ["ai.call", "ai.error"]


def test_parse_json_relaxed():
    data, err = ai_planner._parse_json_relaxed('noise {"a": 1} trailing')
    assert data == {"a": 1} and err is None
    data, err = ai_planner._parse_json_relaxed("[1, 2]")
    assert data is None and "list" in err
