import os
import time
from datetime import timedelta

from sortex.services.ingestion import submit_upload
from sortex.services.orphans import sweep_orphaned_objects
from sortex.services.storage import IncomingFile


def _age(store, key: str, seconds: int) -> None:
    path = store.root / key
    old = time.time() - seconds
    os.utime(path, (old, old))


def test_sweep_deletes_only_old_unreferenced_objects(db, object_store, make_identity):
    photo = IncomingFile(file_name="jar.png", content_type="image/png", data=b"\x89PNG" + b"\x00" * 8)
    kept = submit_upload(db, object_store, make_identity("recycler"), photo, declared_category="glass")
    object_store.put("recycler/1700000000000-orphan.png", b"x", "image/png")
    object_store.put("recycler/1700000000001-fresh.png", b"x", "image/png")

    _age(object_store, kept.upload.storage_key, 7200)
    _age(object_store, "recycler/1700000000000-orphan.png", 7200)

    deleted = sweep_orphaned_objects(db, object_store, timedelta(minutes=60))

    assert deleted == 1
    remaining = sorted(obj.key for obj in object_store.list_objects())
    assert remaining == sorted([kept.upload.storage_key, "recycler/1700000000001-fresh.png"])


def test_sweep_on_empty_store(db, object_store):
    assert sweep_orphaned_objects(db, object_store, timedelta(minutes=60)) == 0


def test_scheduled_sweep_uses_configured_store():
    from sortex.services.storage import get_object_store
    from sortex.workers.tasks import sweep_orphaned_objects_job

    store = get_object_store()
    store.put("someone/1700000000000-stale.jpg", b"x", "image/jpeg")
    _age(store, "someone/1700000000000-stale.jpg", 3 * 3600)

    assert sweep_orphaned_objects_job() == 1
    assert list(store.list_objects()) == []
