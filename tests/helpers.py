"""
In-memory stand-in for the Supabase client and request builders for tests.
"""

import json
import time
import uuid
from types import SimpleNamespace

import azure.functions as func
import jwt

JWT_SECRET = "test-jwt-secret-for-hs256-signing-0123456789"
SUPABASE_URL = "https://proj.supabase.co"


class FakeAPIError(Exception):
    def __init__(self, message):
        super().__init__(message)
        self.message = message


class FakeQuery:
    def __init__(self, db, table):
        self.db = db
        self.table_name = table
        self.action = "select"
        self.payload = None
        self.filters = []
        self.orders = []
        self.row_limit = None

    def select(self, columns="*"):
        self.action = "select"
        return self

    def insert(self, rows):
        self.action = "insert"
        self.payload = rows
        return self

    def update(self, values):
        self.action = "update"
        self.payload = values
        return self

    def delete(self):
        self.action = "delete"
        return self

    def eq(self, column, value):
        self.filters.append(lambda row: row.get(column) == value)
        return self

    def in_(self, column, values):
        values = list(values)
        self.filters.append(lambda row: row.get(column) in values)
        return self

    def order(self, column, desc=False):
        self.orders.append((column, desc))
        return self

    def limit(self, count):
        self.row_limit = count
        return self

    def _matches(self, row):
        return all(check(row) for check in self.filters)

    def execute(self):
        self.db.calls.append((self.table_name, self.action))
        failure = self.db.failures.get((self.table_name, self.action))
        if failure:
            raise FakeAPIError(failure)

        rows = self.db.tables.setdefault(self.table_name, [])

        if self.action == "insert":
            new_rows = self.payload if isinstance(self.payload, list) else [self.payload]
            created = []
            for row in new_rows:
                row = dict(row)
                row.setdefault("id", len(rows) + 1)
                rows.append(row)
                created.append(dict(row))
            return SimpleNamespace(data=created)

        if self.action == "update":
            updated = []
            for row in rows:
                if self._matches(row):
                    row.update(self.payload)
                    updated.append(dict(row))
            return SimpleNamespace(data=updated)

        if self.action == "delete":
            removed = [row for row in rows if self._matches(row)]
            self.db.tables[self.table_name] = [row for row in rows if not self._matches(row)]
            return SimpleNamespace(data=removed)

        selected = [dict(row) for row in rows if self._matches(row)]
        for column, desc in reversed(self.orders):
            selected.sort(
                key=lambda row: (row.get(column) is None, row.get(column) or ""),
                reverse=desc
            )
        if self.row_limit is not None:
            selected = selected[:self.row_limit]
        return SimpleNamespace(data=selected)


class FakeBucket:
    def __init__(self, storage, name):
        self.storage = storage
        self.name = name

    def _objects(self):
        return self.storage.objects.setdefault(self.name, {})

    def upload(self, path, data, options=None):
        if self.storage.fail_upload:
            raise FakeAPIError(self.storage.fail_upload)
        self._objects()[path] = {"data": data, "options": options or {}}
        return SimpleNamespace(path=path)

    def get_public_url(self, path):
        return f"{SUPABASE_URL}/storage/v1/object/public/{self.name}/{path}"

    def remove(self, paths):
        if self.storage.fail_remove:
            raise FakeAPIError(self.storage.fail_remove)
        self.storage.removed.extend(paths)
        for path in paths:
            self._objects().pop(path, None)
        return []

    def list(self, path="", options=None):
        if self.storage.fail_list:
            raise FakeAPIError(self.storage.fail_list)
        return [{"name": name} for name in sorted(self._objects())]


class FakeStorage:
    def __init__(self):
        self.objects = {}
        self.removed = []
        self.fail_upload = None
        self.fail_list = None
        self.fail_remove = None

    def from_(self, bucket):
        return FakeBucket(self, bucket)


class FakeAdminAuth:
    def __init__(self, client):
        self.client = client
        self.users = {}
        self.deleted = []
        self.signed_out = []
        self.fail_create = None

    def create_user(self, attributes):
        if self.fail_create:
            raise FakeAPIError(self.fail_create)
        user_id = str(uuid.uuid4())
        self.users[user_id] = attributes
        return SimpleNamespace(user=SimpleNamespace(id=user_id, email=attributes["email"]))

    def delete_user(self, user_id):
        self.deleted.append(user_id)
        self.users.pop(user_id, None)

    def sign_out(self, token, scope="global"):
        self.signed_out.append(token)


class FakeAuth:
    def __init__(self, client):
        self.admin = FakeAdminAuth(client)


class FakeSupabase:
    """Minimal Supabase client: tables, auth admin and storage."""

    def __init__(self):
        self.tables = {}
        self.calls = []
        self.failures = {}
        self.storage = FakeStorage()
        self.auth = FakeAuth(self)

    def table(self, name):
        return FakeQuery(self, name)

    def fail(self, table, action, message="boom"):
        self.failures[(table, action)] = message


class FakeSignInAuth:
    """Auth namespace of an anon client used for password sign-in."""

    def __init__(self, user=None, error=None):
        self.user = user
        self.error = error
        self.signed_out = False

    def sign_in_with_password(self, credentials):
        if self.error:
            raise FakeAPIError(self.error)
        session = SimpleNamespace(access_token="access", refresh_token="refresh", expires_at=1700000000)
        return SimpleNamespace(user=self.user, session=session)

    def sign_out(self):
        self.signed_out = True


def auth_user(user_id="user-1", email="user@example.com", user_metadata=None, app_metadata=None):
    return SimpleNamespace(
        id=user_id,
        email=email,
        user_metadata=user_metadata or {},
        app_metadata=app_metadata or {},
    )


def make_token(user_id="admin-1", role=None, app_role=None, expires_in=3600):
    payload = {
        "sub": user_id,
        "email": f"{user_id}@example.com",
        "aud": "authenticated",
        "role": "authenticated",
        "exp": int(time.time()) + expires_in,
        "user_metadata": {"role": role} if role else {},
        "app_metadata": {"role": app_role} if app_role else {},
    }
    return jwt.encode(payload, JWT_SECRET, algorithm="HS256")


def make_request(method="GET", url="/api/health", body=None, token=None,
                 route_params=None, params=None, headers=None):
    request_headers = dict(headers or {})
    if token:
        request_headers["Authorization"] = f"Bearer {token}"
    if body is not None and not isinstance(body, bytes):
        body = json.dumps(body).encode("utf-8")
        request_headers.setdefault("Content-Type", "application/json")
    return func.HttpRequest(
        method=method,
        url=url,
        headers=request_headers,
        params=params or {},
        route_params=route_params or {},
        body=body or b"",
    )


def make_multipart_request(url, fields, files, token=None, route_params=None):
    """
    Build a multipart/form-data request.

    Args:
        fields: {"name": "value"}
        files: [(field, filename, content_type, data)]
    """
    boundary = "----estudio-test-boundary"
    parts = []
    for name, value in fields.items():
        parts.append(
            f"--{boundary}\r\n"
            f"Content-Disposition: form-data; name=\"{name}\"\r\n\r\n"
            f"{value}\r\n".encode("utf-8")
        )
    for field, filename, content_type, data in files:
        parts.append(
            f"--{boundary}\r\n"
            f"Content-Disposition: form-data; name=\"{field}\"; filename=\"{filename}\"\r\n"
            f"Content-Type: {content_type}\r\n\r\n".encode("utf-8") + data + b"\r\n"
        )
    parts.append(f"--{boundary}--\r\n".encode("utf-8"))

    return make_request(
        method="POST",
        url=url,
        body=b"".join(parts),
        token=token,
        route_params=route_params,
        headers={"Content-Type": f"multipart/form-data; boundary={boundary}"},
    )


def json_body(response):
    return json.loads(response.get_body().decode("utf-8"))


def register_on_app(register):
    app = func.FunctionApp(http_auth_level=func.AuthLevel.ANONYMOUS)
    register(app)
    return app


def route_handlers(register):
    """Register a feature's routes on a fresh FunctionApp and return the handlers by function name."""
    app = register_on_app(register)
    return SimpleNamespace(**{
        function.get_function_name(): function.get_user_function()
        for function in app.get_functions()
    })
