"""
Unit tests for the resize service
"""

import io
from unittest.mock import Mock

import pytest
from PIL import Image

from sizefit.core.exceptions import DecodeError, InvalidOptionsError
from sizefit.core.optimization.orchestrator import SizeConstrainedOptimizer
from sizefit.models.processing import ImageFormat, ProcessingOptions
from sizefit.services.resize_service import ResizeService


@pytest.fixture
def mock_optimizer():
    return Mock(spec=SizeConstrainedOptimizer)


class TestResizeService:
    """Test decode, validation and delegation"""

    def test_delegates_decoded_raster(self, noise_png_bytes, mock_optimizer):
        service = ResizeService(optimizer=mock_optimizer)
        options = ProcessingOptions(target_size_bytes=20000)

        service.optimize_bytes(noise_png_bytes, options)

        raster, passed_options, original_format = mock_optimizer.process.call_args.args
        assert raster.size == (128, 128)
        assert passed_options is options
        assert original_format is ImageFormat.PNG

    def test_validation_runs_before_decode(self, mock_optimizer):
        service = ResizeService(optimizer=mock_optimizer)
        options = ProcessingOptions(target_size_bytes=5000)

        with pytest.raises(InvalidOptionsError):
            service.optimize_bytes(b"\x89PNG tiny", options)
        mock_optimizer.process.assert_not_called()

    def test_decode_error(self, mock_optimizer):
        service = ResizeService(optimizer=mock_optimizer)
        options = ProcessingOptions(target_size_bytes=2000)

        with pytest.raises(DecodeError):
            service.optimize_bytes(b"x" * 10000, options)

    def test_declared_type_used_for_unknown_source(self, mock_optimizer):
        buffer = io.BytesIO()
        Image.new("RGB", (64, 64)).save(buffer, format="BMP")
        service = ResizeService(optimizer=mock_optimizer)

        service.optimize_bytes(
            buffer.getvalue(), ProcessingOptions(target_size_bytes=2000), "image/jpeg"
        )

        assert mock_optimizer.process.call_args.args[2] is ImageFormat.JPEG

    @pytest.mark.asyncio
    async def test_async_passes_parallel_flag(self, noise_png_bytes, mock_optimizer):
        service = ResizeService(optimizer=mock_optimizer)

        await service.optimize_bytes_async(
            noise_png_bytes, ProcessingOptions(target_size_bytes=20000), parallel=True
        )

        assert mock_optimizer.process_async.call_args.kwargs["parallel"] is True
