import pytest

from api_client import ApiError
from storage import MemoryStorage


class FakeApi:
    """Stands in for ApiClient: canned responses per (method, path).

    A response may be a value, an ApiError to raise, or a callable taking the
    request kwargs.
    """

    def __init__(self, routes=None, token=None, calls=None):
        self.routes = routes if routes is not None else {}
        self.token = token
        self.calls = calls if calls is not None else []

    def with_token(self, token):
        return FakeApi(self.routes, token, self.calls)

    def _handle(self, method, path, **kwargs):
        self.calls.append((method, path, self.token, kwargs))
        resp = self.routes.get((method, path))
        if resp is None:
            raise ApiError("HTTP 404", status=404)
        if isinstance(resp, ApiError):
            raise resp
        if callable(resp):
            return resp(token=self.token, **kwargs)
        return resp

    def get(self, path):
        return self._handle("GET", path)

    def post(self, path, json=None, data=None, files=None):
        return self._handle("POST", path, json=json, data=data, files=files)

    def put(self, path, json=None, data=None, files=None):
        return self._handle("PUT", path, json=json, data=data, files=files)

    def delete(self, path):
        return self._handle("DELETE", path)


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def fake_api():
    return FakeApi()


@pytest.fixture
def branches():
    return [{"id": 1, "name": "A", "address": "Чуй 1"}, {"id": 2, "name": "B", "address": "Ахунбаева 5"}]


@pytest.fixture
def categories():
    return [
        {"id": 5, "name": "Пицца", "emoji": "🍕"},
        {"id": 6, "name": "Напитки", "emoji": "🥤"},
        {"id": 7, "name": "Десерты", "emoji": "🍰"},
    ]


@pytest.fixture
def products():
    return [
        {"id": 10, "name": "Маргарита", "image": "m.jpg", "branch": {"id": 1},
         "subcategory": {"id": 50, "category": {"id": 5}}, "price": 100},
        {"id": 11, "name": "Пепперони", "image": "p.jpg", "branch": {"id": 1},
         "subcategory": {"id": 51, "category": {"id": 5}},
         "small_price": 350, "medium_price": 450, "large_price": 550},
        {"id": 12, "name": "Кола", "image": None, "branch": {"id": 1},
         "subcategory": {"id": 60, "category": {"id": 6}}, "price": "80"},
        {"id": 13, "name": "Чизкейк", "image": None, "branch": {"id": 2},
         "subcategory": {"id": 70, "category": {"id": 7}}, "price": 200},
    ]
