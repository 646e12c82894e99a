import threading

import pytest

from user_registry.store import MissingUserIdError, UserAlreadyExistsError, UserStore


def test_new_store_is_empty(store):
    assert store.list_users() == []
    assert len(store) == 0


def test_register_preserves_insertion_order(store):
    for user_id in ("carol", "alice", "bob"):
        store.register(user_id)
    assert store.list_users() == ["carol", "alice", "bob"]
    assert "alice" in store


def test_duplicate_is_rejected_without_mutation(store):
    store.register("alice")
    with pytest.raises(UserAlreadyExistsError) as exc:
        store.register("alice")
    assert str(exc.value) == "User already exists"
    assert store.list_users() == ["alice"]


def test_ids_are_case_sensitive(store):
    store.register("alice")
    store.register("Alice")
    assert store.list_users() == ["alice", "Alice"]


@pytest.mark.parametrize("user_id", ["", None])
def test_empty_id_is_rejected(store, user_id):
    with pytest.raises(MissingUserIdError) as exc:
        store.register(user_id)
    assert str(exc.value) == "Missing user Id"
    assert len(store) == 0


def test_list_users_returns_snapshot(store):
    store.register("alice")
    snapshot = store.list_users()
    snapshot.append("mallory")
    store.register("bob")
    assert store.list_users() == ["alice", "bob"]
    assert snapshot == ["alice", "mallory"]


def test_separate_stores_are_isolated():
    a, b = UserStore(), UserStore()
    a.register("alice")
    assert b.list_users() == []


def test_concurrent_duplicate_registration_has_one_winner(store):
    n = 32
    barrier = threading.Barrier(n)
    results = []
    results_lock = threading.Lock()

    def worker():
        barrier.wait()
        try:
            store.register("alice")
            outcome = "ok"
        except UserAlreadyExistsError:
            outcome = "dup"
        with results_lock:
            results.append(outcome)

    threads = [threading.Thread(target=worker) for _ in range(n)]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=5)

    assert results.count("ok") == 1
    assert results.count("dup") == n - 1
    assert store.list_users() == ["alice"]
