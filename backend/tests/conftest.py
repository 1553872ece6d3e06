"""Shared fixtures: an app bound to an in-memory MongoDB and JWT helpers."""
from datetime import datetime

import mongomock
import pytest
from bson import ObjectId
from flask_jwt_extended import create_access_token

from app import create_app
from app.config import TestConfig
from app.extensions import db as mongo


@pytest.fixture
def app():
    app = create_app(TestConfig, mongo_client=mongomock.MongoClient())
    yield app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def users(app):
    """Three registered users, keyed by name -> id string."""
    ids = {}
    for name in ("alice", "bob", "carol"):
        oid = ObjectId()
        mongo.users.insert_one({
            "_id": oid,
            "username": name,
            "email": f"{name}@example.com",
            "avatar_url": f"https://example.com/{name}.png",
            "created_at": datetime.utcnow(),
        })
        ids[name] = str(oid)
    return ids


@pytest.fixture
def auth(app):
    """auth(user_id) -> Authorization header for that user."""
    def _headers(user_id):
        with app.app_context():
            token = create_access_token(identity=user_id)
        return {"Authorization": f"Bearer {token}"}
    return _headers


@pytest.fixture
def group(client, users, auth):
    """A group created by alice with bob and carol as members."""
    rv = client.post(
        "/api/v1/groups/",
        json={"name": "Trip", "members": [users["bob"], users["carol"]]},
        headers=auth(users["alice"]),
    )
    assert rv.status_code == 201
    return rv.get_json()["group"]
