"""
Unit tests for format sequencing
"""

import pytest

from sizefit.core.sequencing.format_sequencer import FORMAT_PRIORITY_TABLE, FormatSequencer
from sizefit.models.processing import ImageFormat, OutputFormat

JPEG = ImageFormat.JPEG
PNG = ImageFormat.PNG
WEBP = ImageFormat.WEBP
AVIF = ImageFormat.AVIF


@pytest.fixture
def sequencer():
    return FormatSequencer()


class TestPriorityTable:
    """Test the static priority table"""

    def test_covers_every_combination(self):
        for family in (PNG, JPEG, WEBP, AVIF, None):
            for has_transparency in (True, False):
                for is_photo in (True, False):
                    assert (family, has_transparency, is_photo) in FORMAT_PRIORITY_TABLE

    def test_sequences_are_distinct_and_non_empty(self):
        for sequence in FORMAT_PRIORITY_TABLE.values():
            assert sequence
            assert len(set(sequence)) == len(sequence)

    def test_transparent_png_drops_jpeg(self):
        assert JPEG not in FORMAT_PRIORITY_TABLE[(PNG, True, False)]
        assert JPEG not in FORMAT_PRIORITY_TABLE[(PNG, True, True)]


class TestFormatSequencer:
    """Test sequence selection"""

    def test_transparent_png_graphic(self, sequencer):
        assert sequencer.sequence(PNG, OutputFormat.AUTO, True, False) == (PNG, WEBP, AVIF)

    def test_opaque_png_photo(self, sequencer):
        assert sequencer.sequence(PNG, "auto", False, True) == (PNG, WEBP, AVIF, JPEG)

    def test_jpeg_photo(self, sequencer):
        assert sequencer.sequence(JPEG, "auto", False, True) == (JPEG, WEBP, AVIF)

    def test_jpeg_graphic_prefers_webp(self, sequencer):
        assert sequencer.sequence(JPEG, "auto", False, False) == (WEBP, JPEG, AVIF)

    def test_webp_source(self, sequencer):
        assert sequencer.sequence(WEBP, "auto", True, True) == (WEBP, AVIF, JPEG, PNG)

    def test_avif_source(self, sequencer):
        assert sequencer.sequence(AVIF, "auto", False, False) == (AVIF, WEBP, JPEG, PNG)

    @pytest.mark.parametrize(
        "has_transparency,is_photo,expected",
        [
            (True, True, (WEBP, PNG, AVIF, JPEG)),
            (True, False, (WEBP, PNG, AVIF, JPEG)),
            (False, True, (WEBP, JPEG, AVIF, PNG)),
            (False, False, (WEBP, PNG, AVIF, JPEG)),
        ],
    )
    def test_unknown_source(self, sequencer, has_transparency, is_photo, expected):
        assert sequencer.sequence(None, "auto", has_transparency, is_photo) == expected

    def test_declared_mime_type_resolves(self, sequencer):
        assert sequencer.sequence("image/png", "auto", True, False) == (PNG, WEBP, AVIF)

    def test_unrecognized_mime_type_is_other(self, sequencer):
        assert sequencer.sequence("image/gif", "auto", False, True) == (
            WEBP,
            JPEG,
            AVIF,
            PNG,
        )

    @pytest.mark.parametrize("requested", ["jpeg", "png", "webp", "avif"])
    def test_explicit_format_is_single(self, sequencer, requested):
        sequence = sequencer.sequence(PNG, requested, True, False)
        assert sequence == (ImageFormat(requested),)

    def test_explicit_jpeg_for_transparent_source(self, sequencer):
        # The caller's choice wins even though alpha will be flattened
        assert sequencer.sequence(PNG, OutputFormat.JPEG, True, True) == (JPEG,)

    def test_custom_table(self):
        table = {key: (PNG,) for key in FORMAT_PRIORITY_TABLE}
        assert FormatSequencer(table).sequence(JPEG, "auto", False, True) == (PNG,)
