"""Unit tests for the layout transport codec."""

import base64

import pytest

from room_fit.core.codec import LayoutDecodeError, decode_layout, decode_layout_or_default, encode_layout
from room_fit.schemas.layout import LayoutState


class TestEncodeDecode:
    """Tests for encode_layout / decode_layout."""

    def test_full_layout_survives_transport(self, furnished_layout: LayoutState) -> None:
        """Items, attachments, optional refs and selection all come back."""
        assert decode_layout(encode_layout(furnished_layout)) == furnished_layout

    def test_transport_string_is_url_safe(self, furnished_layout: LayoutState) -> None:
        """No characters that need escaping in a URL query."""
        encoded = encode_layout(furnished_layout)
        assert not set(encoded) & {"+", "/", " "}

    def test_missing_padding_is_tolerated(self, two_item_layout: LayoutState) -> None:
        """Stripped '=' padding is restored before decoding."""
        encoded = encode_layout(two_item_layout).rstrip("=")
        assert decode_layout(encoded) == two_item_layout

    def test_raw_json_is_accepted(self, two_item_layout: LayoutState) -> None:
        """A layout file's contents decode directly."""
        assert decode_layout(two_item_layout.model_dump_json(indent=2)) == two_item_layout

    def test_stored_door_is_pinned_to_floor(self) -> None:
        """A door saved with an elevation loads with y = 0."""
        raw = (
            '{"room": {"width": 100, "height": 100}, "attachments": '
            '[{"id": "d", "kind": "door", "side": "front", "x": 10, "y": 25, "width": 32, "height": 80}]}'
        )
        assert decode_layout(raw).find_attachment("d").y == 0


class TestMalformedInput:
    """Decoding never yields a partial layout."""

    @pytest.mark.parametrize(
        "encoded",
        [
            "",
            "   ",
            "%%%not-base64%%%",
            base64.urlsafe_b64encode(b"\xff\xfe\xfd").decode(),
            base64.urlsafe_b64encode(b"[1, 2, 3]").decode(),
            '{"room": {"width": 0, "height": 100}}',
            '{"room": {"width": 100, "height": 100}, "items": [{"id": "x"}]}',
            '{"room": {"width": 100, "height": 100}',
        ],
    )
    def test_malformed_input_raises(self, encoded: str) -> None:
        """Bad base64, bad UTF-8, bad JSON or bad values all raise LayoutDecodeError."""
        with pytest.raises(LayoutDecodeError):
            decode_layout(encoded)

    def test_duplicate_ids_are_rejected(self) -> None:
        """Ids must be unique across items and attachments."""
        raw = (
            '{"room": {"width": 100, "height": 100}, '
            '"items": [{"id": "x", "kind": "box", "width": 5, "height": 5, "x": 0, "y": 0}], '
            '"attachments": [{"id": "x", "kind": "window", "side": "left", "width": 5, "height": 5}]}'
        )
        with pytest.raises(LayoutDecodeError):
            decode_layout(raw)

    def test_fallback_to_default_room(self) -> None:
        """The lenient loader falls back to an empty default room."""
        layout = decode_layout_or_default("garbage!!", width=120, height=144)
        assert (layout.room.width, layout.room.height) == (120, 144)
        assert layout.items == [] and layout.attachments == []

    def test_fallback_when_nothing_is_given(self) -> None:
        """None also yields the default room."""
        assert decode_layout_or_default(None).room.width == 120


class TestSelection:
    """Tests for how a decoded layout's selection is normalised."""

    ROOM_AND_CONTENTS = (
        '"room": {"width": 100, "height": 100}, '
        '"items": [{"id": "box", "kind": "box", "width": 5, "height": 5}], '
        '"attachments": [{"id": "win", "kind": "window", "side": "left", "width": 5, "height": 5}]'
    )

    def decode(self, selection: str) -> LayoutState:
        return decode_layout("{" + self.ROOM_AND_CONTENTS + ", " + selection + "}")

    def test_item_selection_wins_over_attachment(self) -> None:
        """With both selections set only the item stays selected."""
        layout = self.decode('"selected_item_id": "box", "selected_attachment_id": "win"')
        assert layout.selected_item_id == "box"
        assert layout.selected_attachment_id is None

    @pytest.mark.parametrize(
        "selection",
        ['"selected_item_id": "ghost"', '"selected_attachment_id": "ghost"', '"selected_item_id": "win"'],
    )
    def test_dangling_selection_is_cleared(self, selection: str) -> None:
        """An id that names no entry of the right kind is dropped."""
        layout = self.decode(selection)
        assert layout.selected_item_id is None
        assert layout.selected_attachment_id is None

    def test_attachment_selection_is_kept(self) -> None:
        """A lone valid attachment selection survives."""
        assert self.decode('"selected_attachment_id": "win"').selected_attachment_id == "win"

    def test_dangling_item_does_not_hide_attachment(self) -> None:
        """A dropped item selection leaves a valid attachment selection alone."""
        layout = self.decode('"selected_item_id": "ghost", "selected_attachment_id": "win"')
        assert layout.selected_item_id is None
        assert layout.selected_attachment_id == "win"

    def test_constructed_layout_is_normalised(self) -> None:
        """Building a LayoutState in code goes through the same rule."""
        layout = LayoutState.model_validate({"room": {"width": 10, "height": 10}, "selected_item_id": "ghost"})
        assert layout.selected_item_id is None
