from sizefit.models.processing import ImageFormat, OutputFormat, ProcessingOptions

__all__ = ["ImageFormat", "OutputFormat", "ProcessingOptions"]
