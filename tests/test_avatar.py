"""
Avatar Validation Tests
"""

import io

import pytest
from fastapi import UploadFile
from starlette.datastructures import Headers

from account_service.models.state import AvatarFile
from account_service.utils.avatar import (
    ALLOWED_AVATAR_TYPES, FILE_TOO_LARGE_ERROR, INVALID_TYPE_ERROR, NO_FILE_ERROR,
    read_upload, validate_avatar
)

FIVE_MB = 5 * 1024 * 1024


def make_file(size=1024, content_type="image/png", filename="avatar.png"):
    return AvatarFile(filename=filename, content_type=content_type, content=b"\x00" * size)


class TestValidateAvatar:
    def test_missing_file(self):
        result = validate_avatar(None)
        assert not result.ok
        assert result.error == NO_FILE_ERROR

    @pytest.mark.parametrize("content_type", ALLOWED_AVATAR_TYPES)
    def test_allowed_types(self, content_type):
        assert validate_avatar(make_file(content_type=content_type)).ok

    def test_exactly_five_megabytes_is_accepted(self):
        assert validate_avatar(make_file(size=FIVE_MB)).ok

    def test_oversized_file(self):
        result = validate_avatar(make_file(size=FIVE_MB + 1))
        assert result.error == FILE_TOO_LARGE_ERROR

    @pytest.mark.parametrize("content_type", ["application/pdf", "image/svg+xml", "text/plain", ""])
    def test_disallowed_types(self, content_type):
        result = validate_avatar(make_file(content_type=content_type))
        assert result.error == INVALID_TYPE_ERROR

    def test_size_checked_before_type(self):
        result = validate_avatar(make_file(size=FIVE_MB + 1, content_type="application/pdf"))
        assert result.error == FILE_TOO_LARGE_ERROR

    def test_custom_limit(self):
        result = validate_avatar(make_file(size=200), max_size=100)
        assert result.error == FILE_TOO_LARGE_ERROR


class TestReadUpload:
    @pytest.mark.asyncio
    async def test_reads_upload(self):
        upload = UploadFile(
            file=io.BytesIO(b"png-bytes"),
            filename="me.png",
            headers=Headers({"content-type": "image/png"})
        )

        avatar = await read_upload(upload)

        assert avatar.filename == "me.png"
        assert avatar.content_type == "image/png"
        assert avatar.size == len(b"png-bytes")

    @pytest.mark.asyncio
    async def test_no_upload(self):
        assert await read_upload(None) is None

    @pytest.mark.asyncio
    async def test_empty_part_is_no_file(self):
        upload = UploadFile(file=io.BytesIO(b""), filename="")
        assert await read_upload(upload) is None

    @pytest.mark.asyncio
    async def test_oversized_upload_read_is_bounded(self):
        source = io.BytesIO(b"\x00" * 1000)
        upload = UploadFile(file=source, filename="huge.png", headers=Headers({"content-type": "image/png"}))

        avatar = await read_upload(upload, max_size=100)

        assert avatar.size == 101
        assert source.tell() == 101
        assert validate_avatar(avatar, max_size=100).error == FILE_TOO_LARGE_ERROR

    @pytest.mark.asyncio
    async def test_default_limit(self):
        source = io.BytesIO(b"\x00" * (FIVE_MB + 4096))
        upload = UploadFile(file=source, filename="huge.png", headers=Headers({"content-type": "image/png"}))

        avatar = await read_upload(upload)

        assert avatar.size == FIVE_MB + 1
        assert validate_avatar(avatar).error == FILE_TOO_LARGE_ERROR
