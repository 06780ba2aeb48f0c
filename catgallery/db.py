# catgallery/db.py
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base

Base = declarative_base()


def make_engine(url: str):
    return create_engine(
        url,
        connect_args={"check_same_thread": False} if url.startswith("sqlite") else {}
    )


def make_session_factory(engine):
    return sessionmaker(autoflush=False, bind=engine)


def init_db(engine):
    # registers the tables on Base.metadata
    import catgallery.models  # noqa: F401
    Base.metadata.create_all(bind=engine)
