from datetime import date

import pytest

from studentmanager.model.errors import CsvImportError, PersistenceDecodeError
from studentmanager.model.store import StudentStore
from studentmanager.model.student import StudentField


def last_names(records):
    return [r.last_name for r in records]


class TestStoreMutations:
    """add / remove / update."""

    def test_add_appends_and_assigns_handle(self, store, make_student):
        first = store.add(make_student(last_name="A"))
        second = store.add(make_student(last_name="B"))
        assert last_names(store) == ["A", "B"]
        assert first.record_id is not None
        assert first.record_id != second.record_id

    def test_add_keeps_caller_reference(self, store, make_student):
        record = make_student()
        stored = store.add(record)
        assert stored is record
        assert store[0] is record

    def test_add_none_rejected(self, store):
        with pytest.raises(TypeError):
            store.add(None)

    def test_add_does_not_validate(self, store, make_student):
        store.add(make_student(last_name="", course=42, email="nope"))
        assert len(store) == 1

    def test_remove_by_handle_not_value(self, store, make_student):
        a = store.add(make_student())
        b = store.add(make_student())
        assert a == b

        assert store.remove(b) is True
        assert len(store) == 1
        assert store[0] is a

    def test_remove_missing_is_noop(self, populated_store, make_student):
        assert populated_store.remove(make_student()) is False
        assert len(populated_store) == 3

    def test_update_replaces_in_place(self, populated_store, make_student):
        old = populated_store[1]
        new = make_student(last_name="Smirnova")
        assert populated_store.update(old, new) is True
        assert last_names(populated_store) == ["Petrov", "Smirnova", "Sidorov"]
        assert populated_store.index_of(old) == -1
        assert populated_store[1] is new

    def test_update_missing_is_noop(self, populated_store, make_student):
        before = populated_store.records()
        assert populated_store.update(make_student(), make_student(last_name="X")) is False
        assert populated_store.records() == before

    def test_update_at_out_of_range(self, populated_store, make_student):
        assert populated_store.update_at(3, make_student()) is False
        assert populated_store.update_at(-1, make_student()) is False

    def test_readding_stored_record_creates_distinct_entry(self, store, make_student):
        a = store.add(make_student())
        b = store.add(a)
        assert b is not a
        assert b.record_id != a.record_id
        assert len(store) == 2

    def test_get_by_record_id(self, populated_store):
        target = populated_store[2]
        assert populated_store.get(target.record_id) is target
        assert populated_store.get(9999) is None

    def test_contains(self, populated_store, make_student):
        assert populated_store[0] in populated_store
        assert make_student() not in populated_store

    def test_clear(self, populated_store):
        populated_store.clear()
        assert len(populated_store) == 0


class TestStoreEncapsulation:

    def test_records_returns_copy(self, populated_store):
        snapshot = populated_store.records()
        snapshot.clear()
        assert len(populated_store) == 3

    def test_query_results_do_not_alias(self, populated_store):
        result = populated_store.filter_by_course_and_group()
        result.pop()
        assert len(populated_store) == 3

    def test_queries_do_not_reorder(self, populated_store):
        before = last_names(populated_store)
        populated_store.search_by_last_name("ov")
        populated_store.filter_by_course_and_group(course=2)
        assert last_names(populated_store) == before


class TestSearch:

    def test_add_then_search_exact_last_name(self, populated_store, make_student):
        record = populated_store.add(make_student(last_name="Kuznetsov"))
        assert record in populated_store.search_by_last_name("Kuznetsov")

    def test_case_insensitive_substring(self, populated_store):
        assert last_names(populated_store.search_by_last_name("IVAN")) == ["Ivanova"]
        assert last_names(populated_store.search_by_last_name("ov")) == ["Petrov", "Ivanova", "Sidorov"]

    def test_no_match(self, populated_store):
        assert populated_store.search_by_last_name("zzz") == []

    def test_cyrillic(self, store, make_student):
        store.add(make_student(last_name="Иванов"))
        assert len(store.search_by_last_name("иван")) == 1


class TestFilter:

    def test_no_constraints_returns_everything_in_order(self, populated_store):
        result = populated_store.filter_by_course_and_group(None, None)
        assert result == populated_store.records()
        assert len(result) == len(populated_store)

    def test_course_only(self, populated_store):
        assert last_names(populated_store.filter_by_course_and_group(course=2)) == ["Sidorov"]

    def test_group_only_case_insensitive(self, populated_store):
        assert last_names(populated_store.filter_by_course_and_group(group="G1")) == ["Ivanova", "Sidorov"]

    def test_empty_group_is_no_constraint(self, populated_store):
        assert len(populated_store.filter_by_course_and_group(group="")) == 3

    def test_both(self, populated_store):
        assert last_names(populated_store.filter_by_course_and_group(1, "G1")) == ["Ivanova"]
        assert populated_store.filter_by_course_and_group(3, "G1") == []


class TestSort:

    def test_scenario_courses_1_3_2(self, store, make_student):
        for course in (1, 3, 2):
            store.add(make_student(course=course))
        store.sort_by_course()
        assert [r.course for r in store] == [1, 2, 3]

    def test_sort_by_course_is_stable(self, store, make_student):
        for name, course in [("A", 2), ("B", 1), ("C", 2), ("D", 1)]:
            store.add(make_student(last_name=name, course=course))
        store.sort_by_course()
        assert [r.course for r in store] == [1, 1, 2, 2]
        assert last_names(store) == ["B", "D", "A", "C"]

    def test_sort_by_last_name(self, populated_store):
        populated_store.sort_by_last_name()
        assert last_names(populated_store) == ["Ivanova", "Petrov", "Sidorov"]

    def test_sort_by_group_is_ordinal(self, populated_store):
        populated_store.sort_by_group()
        # Uppercase sorts before lowercase
        assert [r.group for r in populated_store] == ["G1", "G2", "g1"]

    def test_sort_by_dispatch(self, populated_store):
        populated_store.sort_by(StudentField.COURSE)
        assert [r.course for r in populated_store] == [1, 2, 3]

    def test_sort_by_unsupported_field(self, populated_store):
        with pytest.raises(ValueError):
            populated_store.sort_by(StudentField.EMAIL)


class TestStorePersistence:
    """Construction from the data file and saving back."""

    def test_missing_file_gives_empty_store(self, data_path):
        store = StudentStore.from_file(data_path)
        assert len(store) == 0
        assert store.load_error is None

    def test_save_then_load_reproduces_sequence(self, populated_store, data_path):
        populated_store.save()
        reloaded = StudentStore.from_file(data_path)
        assert reloaded.records() == populated_store.records()
        assert reloaded[2].birth_date == date(1999, 12, 31)

    def test_corrupt_file_starts_empty_with_error(self, data_path):
        with open(data_path, "w", encoding="utf-8") as f:
            f.write("{ not json")
        store = StudentStore.from_file(data_path)
        assert len(store) == 0
        assert isinstance(store.load_error, PersistenceDecodeError)
        assert store.load_error.path == data_path

    def test_corrupt_file_strict_raises(self, data_path):
        with open(data_path, "w", encoding="utf-8") as f:
            f.write("{ not json")
        with pytest.raises(PersistenceDecodeError):
            StudentStore.from_file(data_path, strict=True)

    def test_saving_over_corrupt_file_keeps_backup(self, data_path, make_student):
        with open(data_path, "w", encoding="utf-8") as f:
            f.write("{ not json")
        store = StudentStore.from_file(data_path)
        store.add(make_student())
        store.save()

        with open(data_path + ".bak", encoding="utf-8") as f:
            assert f.read() == "{ not json"
        assert StudentStore.from_file(data_path, strict=True).records() == store.records()
        assert store.load_error is None

    def test_load_failure_leaves_store_untouched(self, populated_store, tmp_path):
        bad = tmp_path / "bad.json"
        bad.write_text("[1, 2]", encoding="utf-8")
        before = populated_store.records()
        with pytest.raises(PersistenceDecodeError):
            populated_store.load(str(bad))
        assert populated_store.records() == before

    def test_save_to_other_path_updates_filepath(self, populated_store, tmp_path):
        target = str(tmp_path / "other.json")
        populated_store.save(target)
        assert populated_store.filepath == target


class TestStoreCsv:

    def test_import_replaces_contents(self, populated_store, tmp_path):
        path = tmp_path / "in.csv"
        path.write_text(
            "LastName;FirstName;MiddleName;Course;Group;BirthDate;Email\n"
            "Orlov;Ilya;;4;G3;02.03.2001;orlov@gmail.com\n",
            encoding="utf-8",
        )
        assert populated_store.import_csv(str(path)) == 1
        assert last_names(populated_store) == ["Orlov"]
        assert populated_store[0].record_id is not None

    def test_failed_import_leaves_store_untouched(self, populated_store, tmp_path):
        path = tmp_path / "in.csv"
        path.write_text(
            "LastName;FirstName;MiddleName;Course;Group;BirthDate;Email\n"
            "Orlov;Ilya;;4;G3;02.03.2001;orlov@gmail.com\n"
            "Popov;Ivan;;four;G3;02.03.2001;popov@gmail.com\n",
            encoding="utf-8",
        )
        before = populated_store.records()
        with pytest.raises(CsvImportError):
            populated_store.import_csv(str(path))
        assert populated_store.records() == before
        assert [r.record_id for r in populated_store] == [r.record_id for r in before]

    def test_export_then_import_is_field_equal(self, populated_store, tmp_path):
        path = str(tmp_path / "out.csv")
        assert populated_store.export_csv(path) == 3

        other = StudentStore(filepath=str(tmp_path / "x.json"))
        other.import_csv(path)
        assert other.records() == populated_store.records()
        assert all(a is not b for a, b in zip(other, populated_store))

    def test_empty_round_trip(self, store, tmp_path):
        path = str(tmp_path / "out.csv")
        store.export_csv(path)
        store.import_csv(path)
        assert len(store) == 0
