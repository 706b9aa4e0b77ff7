from storefront.storage import LocalStorage


def test_set_and_get(storage):
    storage.set_item("selectedShippingAddress", "12 Dock Road")
    assert storage.get_item("selectedShippingAddress") == "12 Dock Road"
    assert "selectedShippingAddress" in storage


def test_missing_key(storage):
    assert storage.get_item("nope") is None
    assert "nope" not in storage


def test_values_are_strings(storage):
    storage.set_item("count", 3)
    assert storage.get_item("count") == "3"


def test_survives_a_new_instance(storage, storage_dir):
    storage.set_item("selectedShippingPhoneNumber", "9876543210")
    again = LocalStorage("user-1", base_dir=storage_dir)
    assert again.get_item("selectedShippingPhoneNumber") == "9876543210"


def test_namespaces_are_separate(storage, storage_dir):
    storage.set_item("key", "one")
    other = LocalStorage("user-2", base_dir=storage_dir)
    assert other.get_item("key") is None


def test_remove_several_keys(storage):
    storage.set_item("a", "1")
    storage.set_item("b", "2")
    storage.set_item("c", "3")

    storage.remove_item("a", "b")

    assert storage.get_item("a") is None
    assert storage.get_item("b") is None
    assert storage.get_item("c") == "3"


def test_clear(storage):
    storage.set_item("a", "1")
    storage.clear()
    assert not storage.path.exists()
    assert storage.get_item("a") is None


def test_unreadable_file_is_treated_as_empty(storage, storage_dir):
    storage_dir.mkdir(parents=True)
    storage.path.write_text("{not json", encoding="utf-8")
    assert storage.get_item("a") is None

    storage.set_item("a", "1")
    assert storage.get_item("a") == "1"


def test_no_temp_files_left_behind(storage, storage_dir):
    storage.set_item("a", "1")
    storage.set_item("b", "2")
    assert [p.name for p in storage_dir.iterdir()] == ["user-1.json"]
