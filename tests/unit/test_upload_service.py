import asyncio
import logging
import pytest
from datetime import datetime, timezone
from unittest.mock import patch

from seenai.errors import MetadataWriteError, StorageWriteError, Unauthenticated, ValidationError
from seenai.repositories.video_repository import VideoRepository
from seenai.schemas.pydantic_schemas import PendingVideo
from seenai.services import upload_service
from seenai.services.upload_service import build_storage_path, file_extension, upload_video


def run_upload(storage, repository, principal, **overrides):
    kwargs = {
        "file_name": "talk.MP4",
        "data": b"\x00\x01video-bytes",
        "title": "Keynote rehearsal",
        "category": "speaking",
        "description": "First run",
        "tone_requested": True,
    }
    kwargs.update(overrides)
    return asyncio.run(
        upload_video(principal, storage=storage, repository=repository, **kwargs)
    )


# ---------------------------------------------------------
# Storage paths
# ---------------------------------------------------------
@pytest.mark.parametrize(
    "name,expected",
    [
        ("talk.mp4", "mp4"),
        ("Talk.MOV", "mov"),
        ("archive.tar.webm", "webm"),
        ("no_extension", "bin"),
        (None, "bin"),
    ],
)
def test_file_extension(name, expected):
    assert file_extension(name) == expected


def test_storage_path_is_scoped_to_principal_and_unique():
    first = build_storage_path("user-1", "a.mp4")
    second = build_storage_path("user-1", "a.mp4")

    assert first.startswith("user-1/") and first.endswith(".mp4")
    assert first != second


# ---------------------------------------------------------
# Successful uploads
# ---------------------------------------------------------
def test_valid_submission_creates_one_pending_record(db_session, fake_storage, principal):
    repository = VideoRepository(db_session)

    video = run_upload(fake_storage, repository, principal)

    assert isinstance(video, PendingVideo)
    assert video.status == "pending"
    assert video.user_id == "user-1"
    assert video.title == "Keynote rehearsal"
    assert video.tone_requested is True
    assert len(fake_storage.put_calls) == 1
    assert fake_storage.resolve(video.file_url) == b"\x00\x01video-bytes"
    assert len(repository.recent_for_user("user-1")) == 1


def test_tone_flag_controls_tone_data(db_session, fake_storage, principal):
    repository = VideoRepository(db_session)

    with_tone = run_upload(fake_storage, repository, principal, tone_requested=True)
    without_tone = run_upload(fake_storage, repository, principal, tone_requested=False)

    rows = {row.id: row for row in repository.recent_for_user("user-1")}
    assert rows[with_tone.id].tone_data == {}
    assert rows[without_tone.id].tone_data is None
    assert without_tone.tone_requested is False


def test_created_at_comes_from_clock(db_session, fake_storage, principal):
    fixed = datetime(2025, 1, 2, 3, 4, 5, tzinfo=timezone.utc)

    video = run_upload(fake_storage, VideoRepository(db_session), principal, clock=lambda: fixed)

    assert video.created_at.replace(tzinfo=timezone.utc) == fixed


def test_concurrent_submissions_never_share_a_path(db_session, fake_storage, principal):
    repository = VideoRepository(db_session)

    async def submit_two():
        return await asyncio.gather(
            upload_video(principal, "a.mp4", b"first", "One", "pitch", "", True,
                         storage=fake_storage, repository=repository),
            upload_video(principal, "a.mp4", b"second", "Two", "pitch", "", True,
                         storage=fake_storage, repository=repository),
        )

    first, second = asyncio.run(submit_two())

    assert first.id != second.id
    assert first.file_url != second.file_url
    assert fake_storage.resolve(first.file_url) == b"first"
    assert fake_storage.resolve(second.file_url) == b"second"


# ---------------------------------------------------------
# Rejected submissions: no side effects
# ---------------------------------------------------------
@pytest.mark.parametrize(
    "overrides,missing",
    [
        ({"title": ""}, ["title"]),
        ({"title": "   "}, ["title"]),
        ({"category": "\t"}, ["category"]),
        ({"title": "", "category": ""}, ["title", "category"]),
        ({"data": b""}, ["file"]),
        ({"data": None}, ["file"]),
        ({"title": "", "data": None}, ["title", "file"]),
        ({"title": "", "category": "", "data": b""}, ["title", "category", "file"]),
    ],
)
def test_invalid_submission_has_no_side_effects(db_session, fake_storage, principal, overrides, missing):
    repository = VideoRepository(db_session)

    with patch.object(repository, "insert", wraps=repository.insert) as insert:
        with pytest.raises(ValidationError) as excinfo:
            run_upload(fake_storage, repository, principal, **overrides)

    assert excinfo.value.fields == missing
    assert fake_storage.put_calls == []
    assert insert.call_count == 0


@pytest.mark.parametrize(
    "missing,message",
    [
        (["category"], "Title and category are required (missing: category)."),
        (["title", "category"], "Title and category are required (missing: title, category)."),
        (["file"], "Please select a video file."),
        (["title", "file"], "Title and category are required (missing: title). Please select a video file."),
    ],
)
def test_validation_message_names_missing_fields(missing, message):
    assert upload_service.validation_message(missing) == message


def test_missing_principal_fails_before_storage(db_session, fake_storage):
    repository = VideoRepository(db_session)

    with patch.object(repository, "insert") as insert:
        with pytest.raises(Unauthenticated):
            run_upload(fake_storage, repository, None, title="")

    assert fake_storage.put_calls == []
    insert.assert_not_called()


# ---------------------------------------------------------
# Failures after validation
# ---------------------------------------------------------
def test_storage_failure_writes_no_metadata(db_session, principal, make_storage):
    storage = make_storage(fail_put=True)
    repository = VideoRepository(db_session)

    with patch.object(repository, "insert") as insert:
        with pytest.raises(StorageWriteError):
            run_upload(storage, repository, principal)

    insert.assert_not_called()


def test_metadata_failure_leaves_blob_by_default(fake_storage, principal, caplog):
    repository = VideoRepository(db=None)

    with patch.object(repository, "insert", side_effect=MetadataWriteError("db down")):
        with caplog.at_level(logging.ERROR, logger=upload_service.__name__):
            with pytest.raises(MetadataWriteError):
                run_upload(fake_storage, repository, principal)

    assert len(fake_storage.blobs) == 1
    assert fake_storage.delete_calls == []
    orphan = fake_storage.put_calls[0]
    assert orphan in caplog.text


def test_metadata_failure_removes_blob_when_compensating(fake_storage, principal):
    repository = VideoRepository(db=None)

    with patch.object(repository, "insert", side_effect=MetadataWriteError("db down")):
        with pytest.raises(MetadataWriteError):
            run_upload(fake_storage, repository, principal, compensate=True)

    assert fake_storage.blobs == {}
    assert fake_storage.delete_calls == fake_storage.put_calls


def test_failed_compensation_still_reports_metadata_error(principal, make_storage):
    storage = make_storage(fail_delete=True)
    repository = VideoRepository(db=None)

    with patch.object(repository, "insert", side_effect=MetadataWriteError("db down")):
        with pytest.raises(MetadataWriteError):
            run_upload(storage, repository, principal, compensate=True)

    assert len(storage.blobs) == 1
