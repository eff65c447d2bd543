"""Tests for hugfusion.core.upload_slot — one upload position.

Tests cover:
- Accepting valid files and notifying the listener.
- Rejecting bad types, oversize files and unreadable files.
- A rejection clearing a previously held image.
- Drag state and first-file-wins for drops and browse selections.
- Reads that finish after a newer submit or clear being dropped.
"""

from __future__ import annotations

import asyncio

from hugfusion.core.errors import ErrorKind, ImageReadError
from hugfusion.core.images import UploadedFile
from hugfusion.core.upload_slot import UploadSlot

MIB = 1024 * 1024


def make_slot(events: list, max_file_size: int = 10 * MIB) -> UploadSlot:
    return UploadSlot("Person 1", on_change=events.append, max_file_size=max_file_size)


class GatedUpload:
    """Upload whose read() waits until ``gate`` is set."""

    def __init__(self, name: str, media_type: str, content: bytes):
        self.name = name
        self.media_type = media_type
        self.size = len(content)
        self.content = content
        self.gate = asyncio.Event()

    async def read(self) -> bytes:
        await self.gate.wait()
        return self.content


class TestSubmit:
    """Test UploadSlot.submit."""

    def test_valid_file_is_encoded_and_reported(self, png_upload, png_bytes):
        events = []
        slot = make_slot(events)

        image = asyncio.run(slot.submit(png_upload))

        assert image is not None
        assert image.media_type == "image/png"
        assert image.to_bytes() == png_bytes
        assert slot.current_image == image
        assert slot.last_error is None
        assert events == [image]

    def test_unsupported_type_rejected(self):
        events = []
        slot = make_slot(events)
        gif = UploadedFile.from_bytes("anim.gif", "image/gif", b"GIF89a")

        assert asyncio.run(slot.submit(gif)) is None

        assert slot.last_error == ErrorKind.UNSUPPORTED_MEDIA_TYPE
        assert slot.error_message == "Invalid file type. Please use JPG, JPEG, or PNG."
        assert slot.current_image is None
        assert events == [None]

    def test_oversize_file_rejected(self):
        """A 12 MB PNG is rejected with the size message."""
        events = []
        slot = make_slot(events)
        big = UploadedFile(name="huge.png", media_type="image/png", size=12 * MIB, content=b"")

        assert asyncio.run(slot.submit(big)) is None

        assert slot.last_error == ErrorKind.SIZE_EXCEEDS_LIMIT
        assert slot.error_message == "File is too large. Max size is 10MB."
        assert events == [None]

    def test_file_at_limit_accepted(self):
        slot = make_slot([], max_file_size=16)
        upload = UploadedFile.from_bytes("edge.png", "image/png", b"x" * 16)
        assert asyncio.run(slot.submit(upload)) is not None

    def test_unreadable_file_rejected(self, temp_dir):
        events = []
        slot = make_slot(events)
        missing = UploadedFile.from_path(temp_dir / "vanished.png")

        assert asyncio.run(slot.submit(missing)) is None

        assert slot.last_error == ErrorKind.READ_ERROR
        assert "Could not read" in slot.error_message
        assert events == [None]

    def test_rejection_clears_previous_image(self, png_upload):
        events = []
        slot = make_slot(events)
        asyncio.run(slot.submit(png_upload))

        asyncio.run(slot.submit(UploadedFile.from_bytes("doc.pdf", "application/pdf", b"%PDF")))

        assert slot.current_image is None
        assert events[-1] is None

    def test_success_clears_previous_error(self, png_upload):
        slot = make_slot([])
        asyncio.run(slot.submit(UploadedFile.from_bytes("a.gif", "image/gif", b"")))

        asyncio.run(slot.submit(png_upload))

        assert slot.last_error is None
        assert slot.error_message is None

    def test_works_without_listener(self, png_upload):
        slot = UploadSlot("Person 2")
        assert asyncio.run(slot.submit(png_upload)) is not None


class TestClear:
    def test_clear_resets_and_notifies(self, png_upload):
        events = []
        slot = make_slot(events)
        asyncio.run(slot.submit(png_upload))

        slot.clear()

        assert slot.current_image is None
        assert slot.last_error is None
        assert events[-1] is None


class TestSupersededReads:
    """A slow read must not overwrite a newer submit or a clear."""

    def test_newer_submit_wins(self, png_bytes, jpeg_upload, jpeg_bytes):
        events = []
        slot = make_slot(events)

        async def scenario():
            slow_png = GatedUpload("bob.png", "image/png", png_bytes)
            pending = asyncio.ensure_future(slot.submit(slow_png))
            await asyncio.sleep(0)
            accepted = await slot.submit(jpeg_upload)
            slow_png.gate.set()
            return accepted, await pending

        accepted, dropped = asyncio.run(scenario())

        assert dropped is None
        assert slot.current_image == accepted
        assert slot.current_image.to_bytes() == jpeg_bytes
        assert events == [accepted]

    def test_clear_during_read(self, png_bytes):
        events = []
        slot = make_slot(events)

        async def scenario():
            slow_png = GatedUpload("bob.png", "image/png", png_bytes)
            pending = asyncio.ensure_future(slot.submit(slow_png))
            await asyncio.sleep(0)
            slot.clear()
            slow_png.gate.set()
            return await pending

        assert asyncio.run(scenario()) is None
        assert slot.current_image is None
        assert events == [None]

    def test_failed_stale_read_keeps_newer_image(self, png_upload):
        events = []
        slot = make_slot(events)

        class BrokenRead(GatedUpload):
            async def read(self) -> bytes:
                await self.gate.wait()
                raise ImageReadError("Failed to read bad.png: disk vanished")

        async def scenario():
            broken = BrokenRead("bad.png", "image/png", b"not an image")
            pending = asyncio.ensure_future(slot.submit(broken))
            await asyncio.sleep(0)
            await slot.submit(png_upload)
            broken.gate.set()
            return await pending

        assert asyncio.run(scenario()) is None
        assert slot.current_image is not None
        assert slot.last_error is None
        assert events == [slot.current_image]


class TestDragAndDrop:
    """Test drag highlighting and multi-file handling."""

    def test_drag_enter_and_leave(self):
        slot = make_slot([])
        slot.drag_enter()
        assert slot.drag_active is True
        slot.drag_leave()
        assert slot.drag_active is False

    def test_drop_uses_first_file_only(self, png_upload, jpeg_upload):
        events = []
        slot = make_slot(events)
        slot.drag_enter()

        image = asyncio.run(slot.drop([jpeg_upload, png_upload]))

        assert slot.drag_active is False
        assert image.media_type == "image/jpeg"
        assert len(events) == 1

    def test_drop_nothing(self):
        events = []
        slot = make_slot(events)
        slot.drag_enter()

        assert asyncio.run(slot.drop([])) is None
        assert slot.drag_active is False
        assert events == []

    def test_browse_uses_first_file_only(self, png_upload, jpeg_upload):
        slot = make_slot([])
        image = asyncio.run(slot.browse([png_upload, jpeg_upload]))
        assert image.media_type == "image/png"

    def test_browse_nothing(self):
        assert asyncio.run(make_slot([]).browse([])) is None
