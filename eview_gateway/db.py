from sqlmodel import SQLModel, create_engine, Session
from .settings import settings

def make_engine(url: str):
    # sqlite connections are shared across FastAPI's worker threads
    connect_args = {"check_same_thread": False} if url.startswith("sqlite") else {}
    return create_engine(url, pool_pre_ping=True, connect_args=connect_args)

engine = make_engine(settings.database_url)

def init_db(bind=None):
    SQLModel.metadata.create_all(bind or engine)

def get_session(bind=None):
    # keep attributes loaded after commit so records can be read once the session closes
    return Session(bind or engine, expire_on_commit=False)
