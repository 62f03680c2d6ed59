# hybrid_cart/data/database.py
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.pool import StaticPool

from hybrid_cart.utils.settings import DATABASE_URL


def make_engine(url: str):
    if url.startswith("sqlite"):
        #sqlite w pamieci: jedno polaczenie wspoldzielone miedzy watkami
        engine = create_engine(
            url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )

        #bez tego sqlite ignoruje ON DELETE CASCADE
        @event.listens_for(engine, "connect")
        def _enable_foreign_keys(dbapi_conn, _):
            cursor = dbapi_conn.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

        return engine

    return create_engine(url, pool_pre_ping=True)


engine = make_engine(DATABASE_URL)
SessionLocal = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
Base = declarative_base()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
