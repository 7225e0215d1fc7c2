from database.database import Base, ConnectionPool, build_engine

__all__ = ["Base", "ConnectionPool", "build_engine"]
