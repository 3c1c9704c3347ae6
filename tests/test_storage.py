"""
Tests for whole-file entity storage: schema back-fill, backups and restores.
"""

import pandas as pd
import pytest

from tracker.core import storage
from tracker.core.errors import StorageError
from tracker.core.models import Project, TimeEntry
from tracker.core.storage import (
    backup_path,
    load_entities,
    load_projects,
    persist,
    recompute_all_project_hours,
    recompute_project_hours,
    save_entities,
    save_projects,
    save_time_entries,
)
from tracker.utils.constants import PROJECT_COLUMNS


COLUMNS = ['ID', 'Name', 'Note']


def test_round_trip_preserves_values(tmp_path):
    path = tmp_path / 'things.csv'
    records = [
        {'ID': '007', 'Name': 'Bond, James', 'Note': ''},
        {'ID': '2', 'Name': 'Line\nbreak', 'Note': 'x'},
    ]

    assert save_entities(records, path, COLUMNS) is True
    loaded = load_entities(path, COLUMNS)

    assert loaded == records


def test_missing_column_is_back_filled_with_default(tmp_path):
    path = tmp_path / 'things.csv'
    path.write_text("ID,Name\n1,First\n", encoding='utf-8')

    loaded = load_entities(path, COLUMNS, default_values={'Note': 'n/a'})

    assert loaded == [{'ID': '1', 'Name': 'First', 'Note': 'n/a'}]


def test_project_file_without_note_column_loads_complete_records(data_paths):
    data_paths.base_dir.mkdir(parents=True)
    data_paths.projects.write_text(
        "FullProjectName,Nickname,DueDate\nWebsite,WEBSITE,20240212\n", encoding='utf-8')

    projects = load_projects(data_paths)

    assert len(projects) == 1
    assert projects[0].note == ''
    assert projects[0].status == 'Active'
    assert projects[0].cumulative_hrs == '0.00'


def test_absent_file_returns_empty(tmp_path):
    assert load_entities(tmp_path / 'nope.csv', COLUMNS) == []
    assert not (tmp_path / 'nope.csv').exists()


def test_absent_file_created_with_header_when_asked(tmp_path):
    path = tmp_path / 'sub' / 'things.csv'

    assert load_entities(path, COLUMNS, create_if_missing=True) == []
    assert path.read_text(encoding='utf-8').splitlines()[0] == 'ID,Name,Note'


def test_empty_file_returns_empty(tmp_path):
    path = tmp_path / 'things.csv'
    path.write_text('', encoding='utf-8')

    assert load_entities(path, COLUMNS) == []


def test_malformed_file_returns_empty(tmp_path):
    path = tmp_path / 'things.csv'
    path.write_text("ID,Name\n1,ok\n2,too,many,fields\n", encoding='utf-8')

    assert load_entities(path, ['ID', 'Name']) == []


def test_extra_columns_are_dropped_when_schema_given(tmp_path):
    path = tmp_path / 'things.csv'
    save_entities([{'ID': '1', 'Name': 'a', 'Note': '', 'Stray': 'zzz'}], path, COLUMNS)

    header = path.read_text(encoding='utf-8').splitlines()[0]
    assert header == 'ID,Name,Note'


def test_column_union_used_without_schema(tmp_path):
    path = tmp_path / 'things.csv'
    save_entities([{'A': '1'}, {'B': '2'}], path)

    assert pd.read_csv(path, dtype=str).columns.tolist() == ['A', 'B']


def test_save_keeps_previous_version_as_backup(tmp_path):
    path = tmp_path / 'things.csv'
    save_entities([{'ID': '1', 'Name': 'old', 'Note': ''}], path, COLUMNS)
    save_entities([{'ID': '1', 'Name': 'new', 'Note': ''}], path, COLUMNS)

    bak = backup_path(path)
    assert bak.name == 'things.csv.bak'
    assert 'old' in bak.read_text(encoding='utf-8')
    assert 'new' in path.read_text(encoding='utf-8')


def test_backups_can_be_disabled(tmp_path):
    path = tmp_path / 'things.csv'
    save_entities([{'ID': '1', 'Name': 'a', 'Note': ''}], path, COLUMNS)
    save_entities([{'ID': '1', 'Name': 'b', 'Note': ''}], path, COLUMNS, create_backup=False)

    assert not backup_path(path).exists()


def test_failed_backup_aborts_write(tmp_path, monkeypatch):
    path = tmp_path / 'things.csv'
    save_entities([{'ID': '1', 'Name': 'keep', 'Note': ''}], path, COLUMNS, skip_backup=True)
    original = path.read_text(encoding='utf-8')

    def broken_copy(*args, **kwargs):
        raise OSError("disk full")

    monkeypatch.setattr(storage.shutil, 'copy2', broken_copy)

    assert save_entities([{'ID': '1', 'Name': 'lost', 'Note': ''}], path, COLUMNS) is False
    assert path.read_text(encoding='utf-8') == original


def test_failed_write_restores_backup(tmp_path, monkeypatch):
    path = tmp_path / 'things.csv'
    save_entities([{'ID': '1', 'Name': 'keep', 'Note': ''}], path, COLUMNS, skip_backup=True)
    original = path.read_text(encoding='utf-8')

    def half_written(self, target, *args, **kwargs):
        with open(target, 'w', encoding='utf-8') as f:
            f.write('ID,Na')
        raise OSError("write interrupted")

    monkeypatch.setattr(pd.DataFrame, 'to_csv', half_written)

    assert save_entities([{'ID': '1', 'Name': 'new', 'Note': ''}], path, COLUMNS) is False
    assert path.read_text(encoding='utf-8') == original


def test_failed_write_without_backup_reports_failure(tmp_path, monkeypatch):
    path = tmp_path / 'fresh.csv'

    def refuse(self, *args, **kwargs):
        raise OSError("read-only")

    monkeypatch.setattr(pd.DataFrame, 'to_csv', refuse)

    assert save_entities([{'ID': '1'}], path, ['ID']) is False


def test_persist_raises_storage_error_on_failed_save(data_paths):
    with pytest.raises(StorageError):
        persist(lambda paths, records: False, data_paths, [], 'projects')


def test_typed_save_writes_schema_header(data_paths):
    save_projects(data_paths, [Project(full_project_name='Website', nickname='WEB')])

    header = data_paths.projects.read_text(encoding='utf-8').splitlines()[0]
    assert header.split(',') == PROJECT_COLUMNS


def test_typed_project_round_trip_keeps_every_column(data_paths):
    project = Project(
        full_project_name='Bond, James & Co', nickname='BOND', id1='007', id2='0042.10',
        date_assigned='20240101', due_date='20240212', bf_date='20240115',
        cumulative_hrs='12.50', note=' padded, "quoted" ', proj_folder='',
        closed_date='', status='On Hold',
    )

    assert save_projects(data_paths, [project]) is True

    assert load_projects(data_paths) == [project]


def test_nan_text_survives_round_trip(data_paths):
    project = Project(full_project_name='NaN', nickname='NAN', id1='nan', note='NaN',
                      cumulative_hrs='0.00', status='Active')

    save_projects(data_paths, [project])
    loaded = load_projects(data_paths)[0]

    assert (loaded.full_project_name, loaded.id1, loaded.note) == ('NaN', 'nan', 'NaN')


def test_short_csv_row_loads_blank_fields(data_paths):
    data_paths.projects.parent.mkdir(parents=True, exist_ok=True)
    data_paths.projects.write_text(
        ','.join(PROJECT_COLUMNS) + '\nWebsite,WEBSITE,7\n', encoding='utf-8')

    project = load_projects(data_paths)[0]

    assert project.id1 == '7'
    assert project.id2 == ''
    assert project.note == ''
    assert project.status == 'Active'


def test_recompute_uses_day_sum_or_total(data_paths):
    save_projects(data_paths, [Project(full_project_name='Website', nickname='WEB')])
    save_time_entries(data_paths, [
        TimeEntry(entry_id='a', nickname='WEB', mon='8.0', tue='6.5', total_hours='99'),
        TimeEntry(entry_id='b', nickname='web', total_hours='3'),
        TimeEntry(entry_id='c', nickname='OTHER', mon='5'),
    ])

    assert recompute_project_hours(data_paths, 'Web') is True
    assert load_projects(data_paths)[0].cumulative_hrs == '17.50'


def test_recompute_unknown_project_returns_false(data_paths):
    assert recompute_project_hours(data_paths, 'GHOST') is False


def test_recompute_all_reports_changed_projects(data_paths):
    save_projects(data_paths, [
        Project(full_project_name='Website', nickname='WEB', cumulative_hrs='1.00'),
        Project(full_project_name='Audit', nickname='AUDIT', cumulative_hrs='0.00'),
    ])
    save_time_entries(data_paths, [TimeEntry(entry_id='a', nickname='WEB', total_hours='4.25')])

    assert recompute_all_project_hours(data_paths) == 1
    hours = {p.nickname: p.cumulative_hrs for p in load_projects(data_paths)}
    assert hours == {'WEB': '4.25', 'AUDIT': '0.00'}
    assert recompute_all_project_hours(data_paths) == 0
