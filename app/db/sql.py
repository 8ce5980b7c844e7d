from sqlalchemy import Column, DateTime, String, Text, create_engine, func
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

Base = declarative_base()


class StoredPost(Base):
    __tablename__ = "stored_posts"

    key = Column(String(512), primary_key=True)
    content = Column(Text, nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )


def create_sql_engine(url: str):
    kwargs = {}
    if url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
        if url in ("sqlite://", "sqlite:///:memory:"):
            # keep a single shared connection so the in-memory db survives
            kwargs["poolclass"] = StaticPool
    return create_engine(url, future=True, echo=False, **kwargs)


def get_session_factory(url: str):
    """
    Build a session factory for the given URL and make sure the table exists.
    Called at runtime to avoid import-time connections.
    """
    engine = create_sql_engine(url)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine, autoflush=False, autocommit=False)
