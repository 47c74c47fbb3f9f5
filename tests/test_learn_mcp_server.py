"""Tests for the MCP tools, called as plain functions."""

import pytest

import learn_mcp_server


def tool(name):
    # fastmcp wraps decorated functions in a Tool object exposing .fn
    obj = getattr(learn_mcp_server, name)
    return getattr(obj, "fn", obj)


@pytest.fixture(autouse=True)
def use_manager(monkeypatch, manager):
    monkeypatch.setattr(learn_mcp_server, "_manager", manager)


class TestTools:
    def test_list_subjects(self):
        result = tool("list_subjects")()
        assert [s["name"] for s in result["subjects"]] == [
            "Data Structures",
            "Database Systems",
            "Physics",
        ]

    def test_session_flow(self, binary_search):
        started = tool("start_session")(binary_search["id"], "user-1")
        assert started["status"] == "session_started"
        assert started["question"] == binary_search["question"]

        submit = tool("submit_answer")
        first = submit(started["session_id"], "7", 30)
        assert first["is_correct"] is False
        assert first["confusion_score"] == 50
        assert first["help"]["video_search_query"] == binary_search["video_search_query"]

        second = submit(started["session_id"], "the index is 5", 40)
        assert second["is_correct"] is True
        assert second["is_completed"] is True
        assert "help" not in second

        again = submit(started["session_id"], "5", 41)
        assert "error" in again

    def test_errors_become_dicts(self):
        assert "error" in tool("start_session")("missing", "user-1")
        assert "error" in tool("submit_answer")("missing", "5", 1)

    def test_dashboard(self, binary_search):
        started = tool("start_session")(binary_search["id"], "user-1")
        tool("submit_answer")(started["session_id"], "5", 3)
        dash = tool("get_dashboard")("user-1")
        assert dash["stats"]["completed_sessions"] == 1
