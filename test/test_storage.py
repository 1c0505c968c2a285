import json
import os
import stat

import pytest

from models import Task
from storage import InMemoryTaskStore, JsonFileTaskStore, StoreUnavailable


def make_task(task_id, tag="Work"):
    return Task(
        id=task_id,
        tag=tag,
        description=f"Task {task_id}",
        created_at="2024-01-01",
        due_date="2024-02-10",
    )


def test_missing_file_loads_empty(file_store):
    assert file_store.load_all() == []


def test_unparsable_file_loads_empty(tasks_file, file_store):
    tasks_file.write_text("{not json", encoding="utf-8")
    assert file_store.load_all() == []


def test_undecodable_file_loads_empty(tasks_file, file_store):
    tasks_file.write_bytes(b'{"tasks": [\xff\xfe]}')
    assert file_store.load_all() == []


def test_invalid_record_loads_empty(tasks_file, file_store):
    tasks_file.write_text(json.dumps({"tasks": [{"id": "x"}]}), encoding="utf-8")
    assert file_store.load_all() == []


def test_save_writes_wire_field_names(tasks_file, file_store):
    file_store.save_all([make_task(1)])

    document = json.loads(tasks_file.read_text(encoding="utf-8"))
    assert document == {
        "tasks": [
            {
                "id": 1,
                "etiqueta": "Work",
                "descripcion": "Task 1",
                "fecha_creacion": "2024-01-01",
                "fecha_limite": "2024-02-10",
                "completado": False,
            }
        ]
    }


def test_save_replaces_whole_file(file_store):
    file_store.save_all([make_task(1), make_task(2)])
    file_store.save_all([make_task(2)])

    assert [t.id for t in file_store.load_all()] == [2]


def test_save_keeps_order_and_leaves_no_temp_files(tasks_file, file_store):
    file_store.save_all([make_task(3), make_task(1), make_task(2)])

    assert [t.id for t in file_store.load_all()] == [3, 1, 2]
    assert [p.name for p in tasks_file.parent.iterdir()] == ["tasks.json"]


def test_reads_bare_list_layout(tasks_file, file_store):
    tasks_file.write_text(
        json.dumps([make_task(4).model_dump(by_alias=True)]), encoding="utf-8"
    )
    assert [t.id for t in file_store.load_all()] == [4]


def test_save_to_unwritable_location_raises(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("", encoding="utf-8")
    store = JsonFileTaskStore(blocker / "tasks.json")

    with pytest.raises(StoreUnavailable):
        store.save_all([make_task(1)])


def test_initialize_creates_empty_document(tasks_file, file_store):
    file_store.initialize()

    assert json.loads(tasks_file.read_text(encoding="utf-8")) == {"tasks": []}


def test_initialize_keeps_existing_tasks(file_store):
    file_store.save_all([make_task(1)])
    file_store.initialize()

    assert len(file_store.load_all()) == 1


def test_memory_store_returns_copies():
    store = InMemoryTaskStore([make_task(1)])

    loaded = store.load_all()
    loaded[0].description = "changed"
    loaded.append(make_task(2))

    assert [t.description for t in store.load_all()] == ["Task 1"]


def test_save_keeps_existing_file_mode(tasks_file, file_store):
    file_store.save_all([make_task(1)])
    os.chmod(tasks_file, 0o644)

    file_store.save_all([make_task(2)])

    assert stat.S_IMODE(tasks_file.stat().st_mode) == 0o644


def test_new_file_uses_umask_default_mode(tasks_file, file_store):
    umask = os.umask(0o022)
    try:
        file_store.save_all([make_task(1)])
    finally:
        os.umask(umask)

    assert stat.S_IMODE(tasks_file.stat().st_mode) == 0o644
