"""文件索引：写入、过滤/排序列表、按 id 查询与删除。"""

from datetime import datetime

import pytest

from nitrofs.packages.catalog.core.constants import ROOT_DIRECTORY_ID
from nitrofs.packages.catalog.core.exceptions import InfrastructureError, NotFoundError
from nitrofs.packages.catalog.models.file_entry import FileEntry


def test_record_and_find_by_search(files, make_locator):
    loc = make_locator()
    record = files.record_file(loc, ROOT_DIRECTORY_ID, "a.txt", "notes", 100, "text/plain")

    listed = files.list_files(ROOT_DIRECTORY_ID, search="a")

    assert [f.id for f in listed] == [record.id]
    assert listed[0].locator == loc
    assert listed[0].size == 100
    assert listed[0].description == "notes"


def test_get_file_by_id_returns_locator(files, make_locator):
    loc = make_locator(channel_id="777")
    record = files.record_file(loc, ROOT_DIRECTORY_ID, "movie.mp4", None, 5, "video/mp4")

    fetched = files.get_file_by_id(record.id)

    assert fetched == record
    assert fetched.locator.channel_id == "777"
    assert fetched.description == ""


def test_get_file_by_id_missing(files):
    with pytest.raises(NotFoundError):
        files.get_file_by_id(12345)


def test_record_file_unknown_directory_is_infrastructure_error(files, make_locator):
    with pytest.raises(InfrastructureError) as excinfo:
        files.record_file(make_locator(), 999, "x.bin", "", 1, None)
    assert excinfo.value.context["directory_id"] == 999
    assert files.list_files(999) == []


def test_record_file_rejects_negative_size(files, make_locator):
    with pytest.raises(ValueError):
        files.record_file(make_locator(), ROOT_DIRECTORY_ID, "x.bin", "", -1, None)


def test_missing_mime_type_defaults_to_octet_stream(files, make_locator):
    record = files.record_file(make_locator(), ROOT_DIRECTORY_ID, "blob", "", 1, None)
    assert record.mime_type == "application/octet-stream"


def test_search_and_mime_prefix_are_and_combined(files, make_locator):
    files.record_file(make_locator(), ROOT_DIRECTORY_ID, "report.pdf", "", 10, "application/pdf")
    txt = files.record_file(make_locator(), ROOT_DIRECTORY_ID, "report.txt", "", 20, "text/plain")
    notes = files.record_file(make_locator(), ROOT_DIRECTORY_ID, "notes.txt", "Report draft", 30, "text/plain")
    files.record_file(make_locator(), ROOT_DIRECTORY_ID, "photo.png", "", 40, "image/png")

    listed = files.list_files(ROOT_DIRECTORY_ID, search="REPORT", mime_type_prefix="text/", sort_by="file_name")

    assert [f.id for f in listed] == [notes.id, txt.id]


def test_listing_is_scoped_to_directory(directories, files, make_locator):
    other = directories.create_or_get_directory("other")
    files.record_file(make_locator(), other, "a.txt", "", 1, "text/plain")

    assert files.list_files(ROOT_DIRECTORY_ID) == []
    assert len(files.list_files(other)) == 1


def test_search_treats_wildcards_literally(files, make_locator):
    files.record_file(make_locator(), ROOT_DIRECTORY_ID, "100%_done.txt", "", 1, "text/plain")
    files.record_file(make_locator(), ROOT_DIRECTORY_ID, "plain.txt", "", 1, "text/plain")

    assert [f.file_name for f in files.list_files(ROOT_DIRECTORY_ID, search="%")] == ["100%_done.txt"]
    assert [f.file_name for f in files.list_files(ROOT_DIRECTORY_ID, search="_")] == ["100%_done.txt"]


def test_sort_orders(files, make_locator, set_created_at):
    b = files.record_file(make_locator(), ROOT_DIRECTORY_ID, "b.txt", "", 300, "text/plain")
    a = files.record_file(make_locator(), ROOT_DIRECTORY_ID, "a.txt", "", 100, "text/plain")
    c = files.record_file(make_locator(), ROOT_DIRECTORY_ID, "c.txt", "", 200, "text/plain")
    set_created_at(FileEntry, b.id, datetime(2024, 1, 3))
    set_created_at(FileEntry, a.id, datetime(2024, 1, 1))
    set_created_at(FileEntry, c.id, datetime(2024, 1, 2))

    by_name = files.list_files(ROOT_DIRECTORY_ID, sort_by="file_name")
    by_size = files.list_files(ROOT_DIRECTORY_ID, sort_by="size")
    by_default = files.list_files(ROOT_DIRECTORY_ID)
    by_unknown = files.list_files(ROOT_DIRECTORY_ID, sort_by="nonsense")

    assert [f.file_name for f in by_name] == ["a.txt", "b.txt", "c.txt"]
    assert [f.file_name for f in by_size] == ["b.txt", "c.txt", "a.txt"]
    assert [f.file_name for f in by_default] == ["b.txt", "c.txt", "a.txt"]
    assert by_unknown == by_default


def test_blank_filters_are_ignored(files, make_locator):
    files.record_file(make_locator(), ROOT_DIRECTORY_ID, "a.txt", "", 1, "text/plain")
    files.record_file(make_locator(), ROOT_DIRECTORY_ID, "b.png", "", 1, "image/png")

    assert len(files.list_files(ROOT_DIRECTORY_ID, search="  ", mime_type_prefix="")) == 2


def test_delete_file_reports_whether_a_row_was_removed(files, make_locator):
    record = files.record_file(make_locator(), ROOT_DIRECTORY_ID, "a.txt", "", 1, "text/plain")

    assert files.delete_file(record.id) is True
    assert files.delete_file(record.id) is False
    with pytest.raises(NotFoundError):
        files.get_file_by_id(record.id)


def test_search_term_whitespace_is_part_of_the_match(files, make_locator):
    files.record_file(make_locator(), ROOT_DIRECTORY_ID, "report.txt", "", 1, "text/plain")
    files.record_file(make_locator(), ROOT_DIRECTORY_ID, "report draft.txt", "", 1, "text/plain")
    files.record_file(make_locator(), ROOT_DIRECTORY_ID, "final report.txt", "", 1, "text/plain")

    trailing = files.list_files(ROOT_DIRECTORY_ID, search="report ", sort_by="file_name")
    leading = files.list_files(ROOT_DIRECTORY_ID, search=" report", sort_by="file_name")

    assert [f.file_name for f in trailing] == ["report draft.txt"]
    assert [f.file_name for f in leading] == ["final report.txt"]
