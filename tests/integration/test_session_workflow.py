"""Integration tests for a study session lifecycle."""

from __future__ import annotations

import json

from accrual import DataStore, EventChannel, read_session_file, write_session_file


def test_session_accrue_persist_restore_export(tmp_path) -> None:
    """Rows accrued by several senders should survive persist and restore."""
    events = EventChannel()
    commits: list[int] = []
    store = DataStore(events=events)
    events.on("commit", lambda: commits.append(len(store)))
    store.set({"participant": "p-3", "_start": 0}, suppress_event=True)
    for trial, response in enumerate(["left", "right"]):
        store.set({"sender": "trial", "trial": trial})
        store.state["response"] = response
        store.commit()
    store.set({"sender": "questionnaire", "age": 31})
    store.commit()
    session_path = tmp_path / "session.json"

    write_session_file(session_path, store.snapshot())
    restored = DataStore()
    restored.hydrate_snapshot(read_session_file(session_path))

    assert commits == [1, 2, 3]
    assert restored.extract("response", "trial") == ["left", "right"]
    assert restored.select(["sender", "age"], "questionnaire") == [
        {"sender": "questionnaire", "age": 31}
    ]
    assert restored.export_csv().split("\n")[0] == "participant,sender,age,response,trial"
    assert [json.loads(line) for line in restored.export_jsonl().split("\n")] == (
        restored.clean_data
    )
    assert restored.get("response") == "right"
