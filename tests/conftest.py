import os
import re
import uuid
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import pytest

os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_KEY", "test-anon-key")

from fastapi.testclient import TestClient  # noqa: E402

from cgu_connect.core.dependencies import get_user_supabase  # noqa: E402
from cgu_connect.database.supabase_client import get_supabase  # noqa: E402
from cgu_connect.main import app  # noqa: E402
from cgu_connect.modules.auth.service import clear_auth_cache  # noqa: E402

BASE_TIME = datetime(2024, 9, 1, 12, 0, tzinfo=timezone.utc)

ME = "00000000-0000-0000-0000-00000000000a"
ALICE = "00000000-0000-0000-0000-00000000000b"
BOB = "00000000-0000-0000-0000-00000000000c"
ME_TOKEN = "token-me"
ALICE_TOKEN = "token-alice"


class FakeAPIError(Exception):
    """Shape of postgrest/gotrue/storage errors: carries a .message"""

    def __init__(self, message, code=None):
        super().__init__(message)
        self.message = message
        self.code = code


def _split_top_level(expr):
    parts, depth, current = [], 0, ""
    for ch in expr:
        if ch == "," and depth == 0:
            parts.append(current)
            current = ""
            continue
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
        current += ch
    if current:
        parts.append(current)
    return parts


def _condition(term):
    if term.startswith("and(") and term.endswith(")"):
        inner = [_condition(t) for t in _split_top_level(term[4:-1])]
        return lambda row: all(c(row) for c in inner)
    column, op, value = term.split(".", 2)
    if op == "eq":
        return lambda row: str(row.get(column)) == value
    if op == "ilike":
        regex = re.compile("^" + ".*".join(re.escape(p) for p in value.split("%")) + "$", re.IGNORECASE)
        return lambda row: row.get(column) is not None and bool(regex.match(str(row[column])))
    raise NotImplementedError(op)


class FakeQuery:
    def __init__(self, db, table):
        self.db = db
        self.table_name = table
        self.op = "select"
        self.columns = "*"
        self.count_mode = None
        self.payload = None
        self.filters = []
        self.order_by = None
        self.limit_to = None

    def select(self, columns="*", count=None):
        self.op, self.columns, self.count_mode = "select", columns, count
        return self

    def insert(self, payload):
        self.op, self.payload = "insert", payload
        return self

    def update(self, payload):
        self.op, self.payload = "update", payload
        return self

    def delete(self):
        self.op = "delete"
        return self

    def eq(self, column, value):
        self.filters.append(lambda row: row.get(column) == value)
        return self

    def in_(self, column, values):
        values = list(values)
        self.filters.append(lambda row: row.get(column) in values)
        return self

    def or_(self, expr):
        self.db.or_filters.append((self.table_name, expr))
        conditions = [_condition(t) for t in _split_top_level(expr)]
        self.filters.append(lambda row: any(c(row) for c in conditions))
        return self

    def order(self, column, desc=False):
        self.order_by = (column, desc)
        return self

    def limit(self, n):
        self.limit_to = n
        return self

    def _project(self, row):
        if self.columns == "*":
            return dict(row)
        embed = re.match(r"profiles!follows_(follower|following)_id_fkey\(\*\)", self.columns)
        if embed:
            profile = self.db.find("profiles", row[f"{embed.group(1)}_id"])
            return {"profiles": dict(profile) if profile else None}
        return {c.strip(): row.get(c.strip()) for c in self.columns.split(",")}

    def execute(self):
        self.db.calls.append(("table", self.table_name, self.op))
        failure = self.db.failures.get((self.table_name, self.op))
        if isinstance(failure, Exception):
            raise failure
        if failure:
            raise FakeAPIError(failure)

        rows = self.db.tables.setdefault(self.table_name, [])
        if self.op == "insert":
            row = self.db.new_row(self.table_name, self.payload)
            rows.append(row)
            return SimpleNamespace(data=[dict(row)], count=None)

        matched = [r for r in rows if all(f(r) for f in self.filters)]
        if self.op == "update":
            for r in matched:
                r.update(self.payload)
            return SimpleNamespace(data=[dict(r) for r in matched], count=None)
        if self.op == "delete":
            for r in matched:
                rows.remove(r)
            return SimpleNamespace(data=[dict(r) for r in matched], count=None)

        total = len(matched)
        if self.order_by:
            column, desc = self.order_by
            matched = sorted(matched, key=lambda r: r[column], reverse=desc)
        if self.limit_to is not None:
            matched = matched[:self.limit_to]
        return SimpleNamespace(
            data=[self._project(r) for r in matched],
            count=total if self.count_mode == "exact" else None,
        )


class FakeBucket:
    def __init__(self, db, name):
        self.db = db
        self.name = name

    def upload(self, path, file, file_options=None):
        self.db.calls.append(("storage", self.name, "upload"))
        failure = self.db.failures.get(("storage", "upload"))
        if failure:
            raise FakeAPIError(failure)
        self.db.objects[(self.name, path)] = (file, (file_options or {}).get("content-type"))
        return SimpleNamespace(path=path)

    def get_public_url(self, path):
        return f"https://test-project.supabase.co/storage/v1/object/public/{self.name}/{path}"


class FakeStorage:
    def __init__(self, db):
        self.db = db
        self.buckets = []

    def from_(self, name):
        return FakeBucket(self.db, name)

    def list_buckets(self):
        return [SimpleNamespace(id=b, name=b) for b in self.buckets]

    def create_bucket(self, bucket_id, options=None):
        self.buckets.append(bucket_id)


class FakeAuthAdmin:
    def __init__(self, db):
        self.db = db

    def sign_out(self, jwt, scope="global"):
        self.db.calls.append(("auth", "sign_out"))
        self.db.tokens.pop(jwt, None)


class FakeAuth:
    def __init__(self, db):
        self.db = db
        self.admin = FakeAuthAdmin(db)
        self.passwords = {}
        self.reset_requests = []

    def _user(self, user_id):
        profile = self.db.find("profiles", user_id)
        email = f"{profile['username']}@cgu-odisha.ac.in"
        return SimpleNamespace(id=user_id, email=email, user_metadata={}, created_at=profile["created_at"])

    def _fail(self, name):
        self.db.calls.append(("auth", name))
        failure = self.db.failures.get(("auth", name))
        if failure:
            raise FakeAPIError(failure)

    def sign_up(self, credentials):
        self._fail("sign_up")
        email = credentials["email"]
        if email in self.passwords:
            raise FakeAPIError("User already registered")
        self.passwords[email] = credentials["password"]
        return SimpleNamespace(user=SimpleNamespace(id=str(uuid.uuid4()), email=email), session=None)

    def sign_in_with_password(self, credentials):
        self._fail("sign_in_with_password")
        if self.passwords.get(credentials["email"]) != credentials["password"]:
            raise FakeAPIError("Invalid login credentials")
        username = credentials["email"].split("@", 1)[0]
        profile = next(p for p in self.db.tables["profiles"] if p["username"] == username)
        token = f"token-{username}"
        self.db.tokens[token] = profile["id"]
        return SimpleNamespace(
            user=self._user(profile["id"]),
            session=SimpleNamespace(access_token=token, refresh_token="refresh-" + username),
        )

    def get_user(self, jwt=None):
        self._fail("get_user")
        if jwt not in self.db.tokens:
            raise FakeAPIError("invalid JWT: unable to parse or verify signature")
        return SimpleNamespace(user=self._user(self.db.tokens[jwt]))

    def reset_password_for_email(self, email, options=None):
        self._fail("reset_password_for_email")
        self.reset_requests.append((email, options or {}))


class FakeSupabase:
    """In-memory stand-in for the parts of supabase-py the services call"""

    def __init__(self):
        self.tables = {"profiles": [], "follows": [], "messages": []}
        self.objects = {}
        self.calls = []
        self.failures = {}
        self.or_filters = []
        self.tokens = {ME_TOKEN: ME, ALICE_TOKEN: ALICE}
        self._clock = 0
        self.auth = FakeAuth(self)
        self.storage = FakeStorage(self)

    def table(self, name):
        return FakeQuery(self, name)

    def tick(self):
        self._clock += 1
        return (BASE_TIME + timedelta(minutes=self._clock)).isoformat()

    def new_row(self, table, payload):
        row = {"id": str(uuid.uuid4()), "created_at": self.tick()}
        if table == "messages":
            row["read"] = False
        row.update(payload)
        return row

    def find(self, table, row_id):
        return next((r for r in self.tables[table] if r["id"] == row_id), None)

    def add_profile(self, user_id, username, full_name=None):
        created = self.tick()
        self.tables["profiles"].append({
            "id": user_id, "username": username, "full_name": full_name,
            "avatar_url": None, "created_at": created, "updated_at": created,
        })

    def add_follow(self, follower_id, following_id):
        self.tables["follows"].append(self.new_row("follows", {
            "follower_id": follower_id, "following_id": following_id,
        }))

    def add_message(self, sender_id, receiver_id, content, read=False):
        row = self.new_row("messages", {
            "sender_id": sender_id, "receiver_id": receiver_id, "content": content, "read": read,
        })
        self.tables["messages"].append(row)
        return row

    def reset_calls(self):
        self.calls = []


@pytest.fixture
def fake_supabase():
    db = FakeSupabase()
    db.add_profile(ME, "student", "Student One")
    db.add_profile(ALICE, "alice", "Alice Das")
    db.add_profile(BOB, "bob", None)
    db.auth.passwords["student@cgu-odisha.ac.in"] = "secret123"
    clear_auth_cache()
    yield db
    clear_auth_cache()


@pytest.fixture
def client(fake_supabase):
    app.dependency_overrides[get_supabase] = lambda: fake_supabase
    app.dependency_overrides[get_user_supabase] = lambda: fake_supabase
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    return {"Authorization": f"Bearer {ME_TOKEN}"}


@pytest.fixture
def alice_headers():
    return {"Authorization": f"Bearer {ALICE_TOKEN}"}
