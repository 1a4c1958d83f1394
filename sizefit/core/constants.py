"""Constants and tuning values for the size-constrained optimizer."""

# Quality range accepted by every encoder
MIN_QUALITY = 1
MAX_QUALITY = 100
DEFAULT_QUALITY = 80

# Binary search budget per tolerance level
MAX_PROBES_PER_LEVEL = 10

# Tolerance relaxation (percent of target size)
MIN_LOWER_TOLERANCE_PERCENT = 10
DEFAULT_LOWER_TOLERANCE_PERCENT = 10
DEFAULT_UPPER_TOLERANCE_PERCENT = 10
MAX_UPPER_TOLERANCE_PERCENT = 50
TOLERANCE_STEP_PERCENT = 5
MAX_LOWER_TOLERANCE_PERCENT = 50

# Codec effort (zlib-style 0-9 scale)
MIN_COMPRESSION_LEVEL = 0
MAX_COMPRESSION_LEVEL = 9
DEFAULT_COMPRESSION_LEVEL = 6

# Content analysis sampling
TRANSPARENCY_SAMPLE_DIVISOR = 100  # ~1% of pixels
MAX_CLASSIFICATION_SAMPLES = 10000
EDGE_DIFF_THRESHOLD = 100
GRADIENT_DIFF_THRESHOLD = 10
PHOTO_UNIQUE_COLOR_RATIO = 0.1
OPAQUE_ALPHA = 255

# Caller-side limits
MIN_TARGET_SIZE_BYTES = 1024  # 1KB
DEFAULT_TARGET_RATIO = 0.7  # default target is 70% of the source
MAX_IMAGE_PIXELS = 178956970  # same as PIL default

# File extensions per output format
FORMAT_EXTENSIONS = {
    "jpeg": "jpg",
    "png": "png",
    "webp": "webp",
    "avif": "avif",
}

FORMAT_MIME_TYPES = {
    "jpeg": "image/jpeg",
    "png": "image/png",
    "webp": "image/webp",
    "avif": "image/avif",
}
