"""分片文件索引：去重、分组聚合、重组顺序与整体删除。"""

from datetime import datetime

import pytest

from nitrofs.packages.catalog.core.constants import ROOT_DIRECTORY_ID
from nitrofs.packages.catalog.core.exceptions import (
    ConflictError,
    DuplicatePartialError,
    InfrastructureError,
    NotFoundError,
)
from nitrofs.packages.catalog.models.file_partial import FilePartial
from nitrofs.packages.catalog.services.partial_file_index import find_sequence_problems


def _record_parts(partials, make_locator, name, sizes, *, directory_id=ROOT_DIRECTORY_ID, mime="application/zip", order=None):
    numbers = order or list(range(1, len(sizes) + 1))
    records = {}
    for number in numbers:
        records[number] = partials.record_partial(
            make_locator(),
            directory_id,
            f"{name}.part{number:03d}.nitro",
            number,
            sizes[number - 1],
            name,
            "backup archive",
            mime,
        )
    return records


def test_check_partial_exists_before_and_after_insert(partials, make_locator):
    assert partials.check_partial_exists("part-1", ROOT_DIRECTORY_ID) is False

    partials.record_partial(make_locator(), ROOT_DIRECTORY_ID, "part-1", 1, 10, "f.bin", "", None)

    assert partials.check_partial_exists("part-1", ROOT_DIRECTORY_ID) is True


def test_part_name_uniqueness_is_per_directory(directories, partials, make_locator):
    other = directories.create_or_get_directory("other")
    partials.record_partial(make_locator(), ROOT_DIRECTORY_ID, "part-1", 1, 10, "f.bin", "", None)

    assert partials.check_partial_exists("part-1", other) is False
    partials.record_partial(make_locator(), other, "part-1", 1, 10, "f.bin", "", None)


def test_duplicate_submission_is_a_conflict(partials, make_locator):
    partials.record_partial(make_locator(), ROOT_DIRECTORY_ID, "part-1", 1, 10, "f.bin", "", None)

    with pytest.raises(DuplicatePartialError) as excinfo:
        partials.record_partial(make_locator(), ROOT_DIRECTORY_ID, "part-1", 1, 10, "f.bin", "", None)

    assert isinstance(excinfo.value, ConflictError)
    assert excinfo.value.context == {"part_name": "part-1", "directory_id": ROOT_DIRECTORY_ID}
    assert len(partials.get_partials_by_original_filename("f.bin", ROOT_DIRECTORY_ID)) == 1


def test_unknown_directory_is_infrastructure_error(partials, make_locator):
    with pytest.raises(InfrastructureError):
        partials.record_partial(make_locator(), 404, "part-1", 1, 10, "f.bin", "", None)


def test_invalid_part_number_and_size_rejected(partials, make_locator):
    with pytest.raises(ValueError):
        partials.record_partial(make_locator(), ROOT_DIRECTORY_ID, "p0", 0, 10, "f.bin", "", None)
    with pytest.raises(ValueError):
        partials.record_partial(make_locator(), ROOT_DIRECTORY_ID, "p1", 1, -5, "f.bin", "", None)


def test_grouped_partials_sum_sizes(partials, make_locator):
    _record_parts(partials, make_locator, "big.zip", [1000, 1000, 500])

    groups = partials.list_grouped_partials(ROOT_DIRECTORY_ID)

    assert len(groups) == 1
    group = groups[0]
    assert group.original_filename == "big.zip"
    assert group.size == 2500
    assert group.part_count == 3
    assert group.description == "backup archive"
    assert group.mime_type == "application/zip"


def test_group_created_at_is_latest_part(partials, make_locator, set_created_at):
    records = _record_parts(partials, make_locator, "big.zip", [1, 1, 1])
    set_created_at(FilePartial, records[1].partial_id, datetime(2024, 5, 1, 12, 0))
    set_created_at(FilePartial, records[2].partial_id, datetime(2024, 5, 3, 8, 30))
    set_created_at(FilePartial, records[3].partial_id, datetime(2024, 5, 2, 23, 59))

    group = partials.list_grouped_partials(ROOT_DIRECTORY_ID)[0]

    assert group.created_at.replace(tzinfo=None) == datetime(2024, 5, 3, 8, 30)


def test_groups_split_by_mime_type_and_sorted_by_name(partials, make_locator):
    _record_parts(partials, make_locator, "zeta.iso", [5, 5])
    _record_parts(partials, make_locator, "alpha.mkv", [7], mime="video/x-matroska")
    partials.record_partial(make_locator(), ROOT_DIRECTORY_ID, "alpha-alt-1", 1, 3, "alpha.mkv", "", "video/webm")

    groups = partials.list_grouped_partials(ROOT_DIRECTORY_ID)

    assert [(g.original_filename, g.mime_type) for g in groups] == [
        ("alpha.mkv", "video/webm"),
        ("alpha.mkv", "video/x-matroska"),
        ("zeta.iso", "application/zip"),
    ]


def test_grouped_partials_search(partials, make_locator):
    _record_parts(partials, make_locator, "Holiday.mov", [1])
    _record_parts(partials, make_locator, "taxes.pdf", [1])

    groups = partials.list_grouped_partials(ROOT_DIRECTORY_ID, search="holi")

    assert [g.original_filename for g in groups] == ["Holiday.mov"]


def test_parts_returned_in_ascending_part_number(partials, make_locator):
    _record_parts(partials, make_locator, "big.zip", [10, 20, 30], order=[3, 1, 2])

    parts = partials.get_partials_by_original_filename("big.zip", ROOT_DIRECTORY_ID)

    assert [p.part_number for p in parts] == [1, 2, 3]
    assert [p.part_size for p in parts] == [10, 20, 30]
    assert all(p.uploaded_via_webhook for p in parts)


def test_delete_partials_then_reinsert_same_part_name(partials, make_locator):
    _record_parts(partials, make_locator, "big.zip", [1, 2])

    assert partials.delete_partials("big.zip", ROOT_DIRECTORY_ID) is True
    assert partials.delete_partials("big.zip", ROOT_DIRECTORY_ID) is False
    assert partials.list_grouped_partials(ROOT_DIRECTORY_ID) == []

    partials.record_partial(make_locator(), ROOT_DIRECTORY_ID, "big.zip.part001.nitro", 1, 1, "big.zip", "", None)
    assert partials.check_partial_exists("big.zip.part001.nitro", ROOT_DIRECTORY_ID) is True


def test_find_existing_parts(partials, make_locator):
    _record_parts(partials, make_locator, "big.zip", [1, 1])

    existing = partials.find_existing_parts(
        ["big.zip.part002.nitro", "new.part001.nitro", "big.zip.part001.nitro"],
        ROOT_DIRECTORY_ID,
    )

    assert existing == ["big.zip.part001.nitro", "big.zip.part002.nitro"]
    assert partials.find_existing_parts([], ROOT_DIRECTORY_ID) == []


def test_reconstruction_plan_for_complete_file(partials, make_locator):
    records = _record_parts(partials, make_locator, "big.zip", [1000, 1000, 500])

    plan = partials.get_reconstruction_plan("big.zip", ROOT_DIRECTORY_ID)

    assert plan.is_complete
    assert plan.total_size == 2500
    assert plan.locators == [records[n].locator for n in (1, 2, 3)]


def test_reconstruction_plan_reports_gaps_and_duplicates(partials, make_locator):
    partials.record_partial(make_locator(), ROOT_DIRECTORY_ID, "a", 1, 1, "f.bin", "", None)
    partials.record_partial(make_locator(), ROOT_DIRECTORY_ID, "b", 3, 1, "f.bin", "", None)
    partials.record_partial(make_locator(), ROOT_DIRECTORY_ID, "c", 3, 1, "f.bin", "", None)

    plan = partials.get_reconstruction_plan("f.bin", ROOT_DIRECTORY_ID)

    assert not plan.is_complete
    assert plan.missing_part_numbers == (2,)
    assert plan.duplicate_part_numbers == (3,)
    assert [p.part_name for p in plan.parts] == ["a", "b", "c"]


def test_reconstruction_plan_missing_file(partials):
    with pytest.raises(NotFoundError):
        partials.get_reconstruction_plan("nothing.bin", ROOT_DIRECTORY_ID)


@pytest.mark.parametrize(
    "numbers, missing, duplicates",
    [
        ([], (), ()),
        ([1, 2, 3], (), ()),
        ([2, 3], (1,), ()),
        ([1, 1, 4], (2, 3), (1,)),
    ],
)
def test_find_sequence_problems(numbers, missing, duplicates):
    assert find_sequence_problems(numbers) == (missing, duplicates)


def test_grouped_partials_search_keeps_whitespace(partials, make_locator):
    _record_parts(partials, make_locator, "my movie.mkv", [1])
    _record_parts(partials, make_locator, "mymovie.mkv", [1])

    leading = partials.list_grouped_partials(ROOT_DIRECTORY_ID, search=" movie")
    trailing = partials.list_grouped_partials(ROOT_DIRECTORY_ID, search="my ")

    assert [g.original_filename for g in leading] == ["my movie.mkv"]
    assert [g.original_filename for g in trailing] == ["my movie.mkv"]
