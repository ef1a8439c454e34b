import time

from backend.display import CodeRow, CodeTicker, format_rows, progress_bar

RFC_SECRET = "GEZDGNBVGY3TQOJQGEZDGNBVGY3TQOJQ"

ACCOUNTS = [
    {"id": 1, "label": "RFC", "issuer": "Example", "secret": RFC_SECRET},
    {"id": 2, "label": "Broken", "issuer": "", "secret": "!!!!"},
]


def test_tick_computes_codes_at_one_instant():
    rendered = []
    ticker = CodeTicker(lambda: ACCOUNTS, rendered.append, clock=lambda: 59.4)

    rows = ticker.tick()

    assert rendered == [rows]
    assert rows == [
        CodeRow(1, "RFC", "Example", "287082", 1),
        CodeRow(2, "Broken", "", None, 1),
    ]


def test_accounts_are_reread_every_tick():
    accounts = []
    ticker = CodeTicker(lambda: list(accounts), lambda rows: None, clock=lambda: 59)
    assert ticker.snapshot() == []
    accounts.append(ACCOUNTS[0])
    assert [row.code for row in ticker.snapshot()] == ["287082"]


def test_run_stops_after_max_ticks():
    times = iter([59, 60, 61])
    rendered = []
    ticker = CodeTicker(lambda: ACCOUNTS[:1], rendered.append,
                        clock=lambda: next(times), interval=0)

    assert ticker.run(max_ticks=3) == 3
    assert [rows[0].remaining for rows in rendered] == [1, 30, 29]
    assert rendered[0][0].code != rendered[1][0].code


def test_stop_from_render_callback():
    ticker = None

    def render(rows):
        ticker.stop()

    ticker = CodeTicker(lambda: ACCOUNTS[:1], render, clock=lambda: 59, interval=0)
    assert ticker.run() == 1


def test_stopped_ticker_does_not_tick():
    ticker = CodeTicker(lambda: ACCOUNTS, lambda rows: None, clock=lambda: 59)
    ticker.stop()
    assert ticker.run() == 0


def test_progress_bar():
    assert progress_bar(30) == "#" * 30
    assert progress_bar(15) == "#" * 15 + "." * 15
    assert progress_bar(0, width=4) == "...."


def test_format_rows():
    text = format_rows([
        CodeRow(1, "RFC", "Example", "287082", 1),
        CodeRow(2, "Broken", "", None, 1),
    ])
    lines = text.splitlines()
    assert lines[0] == "Example: RFC  287082"
    assert lines[1] == "Broken        ------"
    assert lines[2].endswith(" 1s left")


def test_format_rows_empty():
    assert "No accounts yet" in format_rows([])


def test_default_clock_is_looked_up_at_construction(monkeypatch):
    monkeypatch.setattr(time, "time", lambda: 59.0)
    ticker = CodeTicker(lambda: ACCOUNTS[:1], lambda rows: None)
    assert [row.code for row in ticker.snapshot()] == ["287082"]
