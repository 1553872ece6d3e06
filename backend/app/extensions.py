from pymongo import MongoClient

_client = None
_db = None


def init_mongo(app, client=None):
    """Connect to MongoDB. ``client`` lets callers hand in a ready client."""
    global _client, _db
    _client = client if client is not None else MongoClient(app.config["MONGO_URI"])
    _db = _client[app.config["MONGO_DBNAME"]]

    app.logger.info("[MongoDB] Connected to database: %s", _db.name)


# Proxy that always resolves to the current db
class _DBProxy:
    def __getattr__(self, name):
        if _db is None:
            raise RuntimeError("Database not initialized. Call init_mongo first.")
        return getattr(_db, name)

    def __getitem__(self, name):
        if _db is None:
            raise RuntimeError("Database not initialized. Call init_mongo first.")
        return _db[name]

    def __bool__(self):
        return _db is not None


db = _DBProxy()
