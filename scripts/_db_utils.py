from __future__ import annotations

from contextlib import contextmanager

from sqlalchemy.orm import Session

from app.acme.db import build_engine, make_sessionmaker


@contextmanager
def script_session(db_url: str):
    # build_engine also turns on SQLite foreign keys, same as the web app.
    engine = build_engine(db_url)
    s: Session = make_sessionmaker(engine)()
    try:
        yield s
        s.commit()
    except Exception:
        s.rollback()
        raise
    finally:
        s.close()
        engine.dispose()
