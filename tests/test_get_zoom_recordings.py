import io
import json
from datetime import date

import pytest

import GetZoomRecordings
from GetZoomRecordings import build_export, dump_export, export_recordings, main

MEETINGS = [
    {
        "id": 85746065432,
        "uuid": "4444AAAiAAAAAiAiAiiAii==",
        "topic": "Réunion d'équipe",
        "recording_files": [
            {"id": "f1", "recording_type": "audio_only", "recording_start": "2025-10-06T12:00:00Z"},
            {"id": "f2", "recording_type": "chat_file", "play_url": "https://zoom.us/rec/play/f2"},
        ],
    },
    {"id": 123, "topic": "No UUID", "recording_files": []},
]


@pytest.fixture
def no_network(monkeypatch):
    monkeypatch.setattr(GetZoomRecordings, "load_dotenv", lambda: None)
    monkeypatch.setattr(GetZoomRecordings, "get_access_token", lambda config: "tok")

    pages = {
        "": {"meetings": MEETINGS[:1], "next_page_token": "p1"},
        "p1": {"meetings": MEETINGS[1:], "next_page_token": ""},
    }
    monkeypatch.setattr(
        GetZoomRecordings, "fetch_recordings_page",
        lambda token, from_date, to_date, next_page_token: pages[next_page_token],
    )


def test_export_round_trips_through_json():
    export = build_export(date(2025, 10, 6), date(2025, 10, 7), MEETINGS, 2)

    assert json.loads(dump_export(export)) == export
    assert json.loads(dump_export(export, pretty=False))["meetings"] == MEETINGS


def test_dump_export_pretty_and_compact():
    export = build_export(date(2025, 10, 6), date(2025, 10, 7), [], 1)

    assert dump_export(export).startswith('{\n  "from": "2025-10-06"')
    assert "\n" not in dump_export(export, pretty=False)


def test_export_recordings_counts_pages():
    pages = iter([
        {"meetings": MEETINGS[:1], "next_page_token": "next"},
        {"meetings": MEETINGS[1:]},
    ])
    log = io.StringIO()

    export = export_recordings(lambda token: next(pages), date(2025, 10, 6), date(2025, 10, 7), log=log)

    assert export["total_records"] == 2
    assert export["page_count"] == 2
    assert export["meetings"] == MEETINGS
    assert "Page 2: 1 meeting(s) (last page)" in log.getvalue()


def test_main_writes_output_file(no_network, tmp_path):
    output = tmp_path / "recordings.json"

    assert main(["--from", "2025-10-06", "--to", "2025-10-07", "-o", str(output)]) == 0

    export = json.loads(output.read_text(encoding="utf-8"))
    assert export["from"] == "2025-10-06"
    assert export["to"] == "2025-10-07"
    assert export["page_count"] == 2
    assert export["meetings"] == MEETINGS


def test_main_prints_compact_json_to_stdout(no_network, capsys):
    assert main(["-f", "2025-10-06", "-t", "2025-10-07", "--compact"]) == 0

    out = capsys.readouterr().out
    assert json.loads(out)["total_records"] == 2
    assert out.count("\n") == 1


def test_main_rejects_reversed_range_before_any_request(monkeypatch):
    def fail(*args, **kwargs):
        raise AssertionError("no request expected")

    monkeypatch.setattr(GetZoomRecordings, "get_access_token", fail)

    with pytest.raises(SystemExit) as excinfo:
        main(["--from", "2025-10-07", "--to", "2025-10-06"])
    assert excinfo.value.code == 1


def test_main_requires_both_dates():
    with pytest.raises(SystemExit) as excinfo:
        main(["--from", "2025-10-07"])
    assert excinfo.value.code == 1


def test_main_reports_missing_configuration(monkeypatch, capsys):
    monkeypatch.setattr(GetZoomRecordings, "load_dotenv", lambda: None)
    monkeypatch.delenv("CLIENT_SECRET")

    assert main(["-f", "2025-10-06", "-t", "2025-10-07"]) == 1
    assert "CLIENT_SECRET" in capsys.readouterr().err


def test_main_aborts_on_transport_error(no_network, monkeypatch, http_error, tmp_path, capsys):
    def failing_page(token, from_date, to_date, next_page_token):
        raise http_error(500, {"message": "Internal error"})

    monkeypatch.setattr(GetZoomRecordings, "fetch_recordings_page", failing_page)
    output = tmp_path / "recordings.json"

    assert main(["-f", "2025-10-06", "-t", "2025-10-07", "-o", str(output)]) == 1
    assert not output.exists()
    assert "Internal error" in capsys.readouterr().err
