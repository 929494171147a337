import pytest

from ostrich_canvas.api import create_app
from ostrich_canvas.base import FlowError
from ostrich_canvas.schemas import AnalyzeQueryOutput, CleanDataOutput, Sale, SummarizeThreadOutput
from ostrich_canvas.session import DEMO_SCRIPT, DemoSession


class StubAnalyst:
    def __init__(self):
        self.payloads = []

    def analyze(self, payload):
        self.payloads.append(payload)
        return AnalyzeQueryOutput(summary=f"Answer to: {payload.query}")


class StubCleaner:
    def clean(self, payload):
        rows = [s.model_copy(update={"region": s.region.title()}) for s in payload.sales_data]
        return CleanDataOutput(cleaned_data=rows, summary="- Fixed region casing")


class StubForecaster:
    def forecast(self, payload):
        return [Sale(product="Forecast", region="All", revenue=23000, month="May")] * payload.months


class FailingFlow:
    def analyze(self, payload):
        raise FlowError("boom")

    clean = forecast = summarize = analyze


class StubSummarizer:
    def summarize(self, payload):
        return SummarizeThreadOutput(summary=f"{len(payload.thread)} chars summarized")


@pytest.fixture()
def analyst():
    return StubAnalyst()


@pytest.fixture()
def client(analyst):
    session = DemoSession(analyst=analyst.analyze, analyze_delay=0, forecast_delay=0)
    app = create_app(session=session, analyst=analyst, cleaner=StubCleaner(),
                     forecaster=StubForecaster(), summarizer=StubSummarizer())
    return app.test_client()


@pytest.fixture()
def failing_client():
    session = DemoSession(analyze_delay=0, forecast_delay=0)
    app = create_app(session=session, analyst=FailingFlow(), cleaner=FailingFlow(),
                     forecaster=FailingFlow(), summarizer=FailingFlow())
    return app.test_client()


def test_get_data(client):
    rows = client.get("/api/data").get_json()
    assert len(rows) == 15
    assert rows[0]["marketingSpend"] == 2000


def test_chat_plays_script_by_default(client):
    resp = client.post("/api/chat", json={})
    body = resp.get_json()
    assert resp.status_code == 200
    assert body["sender"] == "assistant"
    assert body["step"] == 1
    assert body["next_prompt"] == DEMO_SCRIPT[1]
    assert body["state"]["active_sheet"]["layout"][0]["i"] == "spreadsheet"


def test_chat_freeform_unrecognized_goes_to_analyst(client, analyst):
    body = client.post("/api/chat", json={"message": "What is the total revenue?"}).get_json()
    assert body["text"] == "Answer to: What is the total revenue?"
    assert analyst.payloads[0].query == "What is the total revenue?"


def test_chat_empty_message(client):
    assert client.post("/api/chat", json={"message": "  "}).status_code == 400


def test_chat_after_script_complete_requires_message(client):
    for _ in DEMO_SCRIPT:
        client.post("/api/chat", json={})
    assert client.get("/api/chat").get_json()["status"] == "script-complete"
    assert client.post("/api/chat", json={}).status_code == 400
    assert client.post("/api/chat", json={"message": "add a pivot table"}).status_code == 200


def test_chat_reset(client):
    client.post("/api/chat", json={})
    client.post("/api/chat", json={})
    body = client.post("/api/chat/reset").get_json()
    assert body["step"] == 0
    assert len(body["messages"]) == 1
    assert body["state"]["active_sheet"]["layout"] == []


def test_highlight_and_filter_show_in_state(client):
    for _ in range(5):
        client.post("/api/chat", json={})
    state = client.get("/api/state").get_json()
    assert state["highlight_high_revenue"] is True
    assert state["filtered"] == 8
    assert state["total"] == 15
    assert state["highlighted_row_ids"] == ["sale-3", "sale-7", "sale-11", "sale-13", "sale-15"]

    chart = client.get("/api/chart").get_json()
    assert [d["region"] for d in chart["current"]] == ["East", "North"]
    assert len(chart["previous"]) == 4
    assert chart["figure"]["data"]


def test_analyze_route(client):
    resp = client.post("/api/analyze", json={"query": "total cac?", "history": [{"sender": "user", "text": "hi"}]})
    assert resp.status_code == 200
    assert resp.get_json() == {"summary": "Answer to: total cac?"}


def test_analyze_requires_query(client):
    assert client.post("/api/analyze", json={}).status_code == 400


def test_clean_route(client):
    resp = client.post("/api/clean", json={"salesData": [
        {"product": "Gadget X", "region": "north", "revenue": 1, "month": "May"},
    ]})
    body = resp.get_json()
    assert body["cleanedData"][0]["region"] == "North"
    assert body["summary"] == "- Fixed region casing"


def test_clean_requires_sales_data(client):
    resp = client.post("/api/clean", json={})
    assert resp.status_code == 400
    assert resp.get_json() == {"error": "Sales data is required."}


def test_forecast_route(client):
    rows = client.post("/api/forecast", json={"months": 2}).get_json()
    assert len(rows) == 2
    assert rows[0]["month"] == "May"


def test_summarize_route_serializes_thread(client):
    body = client.post("/api/summarize", json={"thread": [{"user": "CFO", "text": "ok"}]}).get_json()
    assert body["summary"].endswith("chars summarized")


@pytest.mark.parametrize("path,payload,message", [
    ("/api/analyze", {"query": "hi"}, "Failed to analyze data."),
    ("/api/clean", {"salesData": [{"product": "a", "region": "b", "revenue": 1, "month": "c"}]},
     "Failed to clean data."),
    ("/api/forecast", {"months": 3}, "Failed to generate forecast."),
    ("/api/summarize", {"thread": "[]"}, "Failed to summarize thread."),
])
def test_flow_failures_return_500(failing_client, path, payload, message):
    resp = failing_client.post(path, json=payload)
    assert resp.status_code == 500
    assert resp.get_json() == {"error": message}


def test_sheet_routes(client):
    state = client.post("/api/sheet/add").get_json()
    assert state["active_sheet_id"] == "sheet3"

    state = client.post("/api/sheet/rename", json={"sheet_id": "sheet3", "name": "Scratch"}).get_json()
    assert state["sheets"][-1]["name"] == "Scratch"

    client.post("/api/sheet/remove", json={"sheet_id": "sheet3"})
    client.post("/api/sheet/remove", json={"sheet_id": "sheet2"})
    state = client.post("/api/sheet/remove", json={"sheet_id": "sheet1"}).get_json()
    assert [s["id"] for s in state["sheets"]] == ["sheet1"]


def test_layout_route(client):
    layout = [{"i": "chart", "x": 0, "y": 0, "w": 6, "h": 6, "minW": 6, "minH": 6}]
    state = client.post("/api/layout", json={"layout": layout}).get_json()
    assert state["active_sheet"]["layout"] == layout
    assert client.post("/api/layout", json={"layout": [{"i": "chart"}]}).status_code == 400


def test_rows_and_artifacts(client):
    state = client.post("/api/row/add").get_json()
    assert state["total"] == 16
    new_id = state["rows"][-1]["id"]
    state = client.post("/api/row/delete", json={"row_id": new_id}).get_json()
    assert state["total"] == 15

    state = client.post("/api/artifact/rename", json={"key": "pivotTable", "name": "@pivot-q1"}).get_json()
    assert state["artifact_names"]["pivotTable"] == "@pivot-q1"


def test_widget_routes(client):
    pivot = client.get("/api/pivot").get_json()
    assert pivot["rows"][-1]["Product"] == "Grand Total"
    assert client.get("/api/kpis").get_json()["total_sales"] == 15
    assert client.get("/api/abtest").get_json()["winner"] == "B"
    assert len(client.get("/api/whatif").get_json()["scenarios"]) == 2


def test_comment_routes(client):
    state = client.post("/api/comment/add", json={"artifact_name": "KPIs", "text": "Nice"}).get_json()
    comment = state["activities"][0]
    assert comment["text"] == "Nice"

    client.post("/api/comment/resolve", json={"activity_id": comment["id"]})
    activities = client.get("/api/activities").get_json()
    assert activities[0]["resolved"] is True

    client.post("/api/comment/scrap", json={"activity_id": comment["id"]})
    assert all(a["id"] != comment["id"] for a in client.get("/api/activities").get_json())

    assert client.post("/api/comment/add", json={"text": ""}).status_code == 400


def test_unknown_flow_name_rejected():
    with pytest.raises(ValueError):
        create_app(translator=object())


def test_pivot_covers_all_regions_after_filter(client):
    client.post("/api/chat", json={"message": "filter the data to show only North and East"})
    assert client.get("/api/state").get_json()["filtered"] == 8

    pivot = client.get("/api/pivot").get_json()
    assert pivot["headers"] == ["Product", "East", "North", "South", "West", "Total"]
    assert pivot["rows"][-1]["Total"] == 228000


def test_chat_non_string_message(client):
    resp = client.post("/api/chat", json={"message": 5})
    assert resp.status_code == 400
    assert client.get("/api/chat").get_json()["messages"][-1]["sender"] == "assistant"
