from flask import Flask
from sqlalchemy import create_engine, inspect

from ingestion import __main__ as entry
from ingestion import init_db


def test_main_runs_selected_backend(monkeypatch, db_url):
    calls = {}

    def fake_run(self, host=None, port=None, **kwargs):
        calls.update(name=self.config["BACKEND_IDENTITY"].name, host=host, port=port, **kwargs)

    monkeypatch.setattr(Flask, "run", fake_run)
    monkeypatch.setenv("DATABASE_URL", db_url)
    monkeypatch.delenv("PORT", raising=False)
    entry.main(["--backend", "b"])
    assert calls == {"name": "backend-b", "host": "0.0.0.0", "port": 3000, "threaded": True}


def test_main_port_flag(monkeypatch, db_url):
    ports = []
    monkeypatch.setattr(Flask, "run", lambda self, host=None, port=None, **kw: ports.append(port))
    monkeypatch.setenv("DATABASE_URL", db_url)
    entry.main(["--port", "9999"])
    assert ports == [9999]


def test_init_db_creates_table_and_indexes(monkeypatch, db_url, capsys):
    monkeypatch.setenv("DATABASE_URL", db_url)
    init_db.main()
    assert "created successfully" in capsys.readouterr().out

    engine = create_engine(db_url)
    inspector = inspect(engine)
    assert "requests" in inspector.get_table_names()
    assert {i["name"] for i in inspector.get_indexes("requests")} >= {"idx_backend_name", "idx_ts"}
    engine.dispose()
