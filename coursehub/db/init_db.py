# coursehub/db/init_db.py
from coursehub.db.session import engine
from coursehub.db.base import Base


def init_db():
    Base.metadata.create_all(bind=engine)
