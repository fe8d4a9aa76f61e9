"""Size-bounded JPEG re-encoding for profile images.

The encoder walks a fixed schedule of (quality, width) pairs and returns the
first progressive JPEG that fits under the size ceiling:

- width 200: quality 80, 70, 60, 50, 40, 30
- width 100: quality 60, 50, 40, 30, 20, 10 (entered once, when quality
  would drop below 30)
- a final forced attempt at width 80, quality 10

Quality strictly decreases except for the single reset into the 100 px
regime, so the search never runs more than a dozen or so renders.
"""

from collections.abc import Callable
import io
import time

from aws_lambda_powertools import Logger
from PIL import Image, ImageOps

from core.config import MediaSettings
from core.models.errors import DecodeError, EncodingError
from core.models.image import EncodingAttempt, EncodingResult
from core.utils.constants import (
    ERROR_CODE_IMAGE_ENCODING_TIMEOUT,
    FORCED_QUALITY,
    FORCED_WIDTH,
    INITIAL_QUALITY,
    INITIAL_WIDTH,
    MIN_QUALITY,
    QUALITY_STEP,
    REDUCED_WIDTH,
    REDUCED_WIDTH_QUALITY,
    REGIME_SWITCH_QUALITY,
    SIZE_CEILING,
    format_file_size,
)

logger = Logger(UTC=True)

# Pillow raises a mix of these for corrupt or truncated input
_DECODE_FAILURES = (OSError, ValueError, SyntaxError, Image.DecompressionBombError)


class SizeBoundedEncoder:
    """Re-encodes arbitrary image bytes into a JPEG no larger than the ceiling.

    The encoder is stateless between calls and safe to share across threads.
    """

    def __init__(
        self,
        *,
        size_ceiling: int = SIZE_CEILING,
        initial_quality: int = INITIAL_QUALITY,
        initial_width: int = INITIAL_WIDTH,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.size_ceiling = size_ceiling
        self.initial_quality = initial_quality
        self.initial_width = initial_width
        self._clock = clock

    @classmethod
    def from_settings(cls, settings: MediaSettings) -> "SizeBoundedEncoder":
        return cls(
            size_ceiling=settings.size_ceiling,
            initial_quality=settings.initial_quality,
            initial_width=settings.initial_width,
        )

    def encode(self, original: bytes, *, deadline: float | None = None) -> bytes:
        """Return JPEG bytes no larger than the size ceiling.

        Args:
            original: Raw image bytes in any format Pillow can read
            deadline: Optional `time.monotonic()` value after which the
                search is abandoned

        Raises:
            DecodeError: If the input is empty or not a readable image
            EncodingError: If the ceiling cannot be met, or the deadline passed
        """
        return self.encode_with_attempts(original, deadline=deadline).data

    def encode_with_attempts(
        self,
        original: bytes,
        *,
        deadline: float | None = None,
    ) -> EncodingResult:
        """Same as `encode`, but also return every attempt made."""
        image = self._decode(original)
        attempts: list[EncodingAttempt] = []

        quality = self.initial_quality
        width = self.initial_width

        while quality >= MIN_QUALITY:
            self._check_deadline(deadline, attempts)
            data = self._attempt(image, width=width, quality=quality, attempts=attempts)

            if len(data) <= self.size_ceiling:
                return EncodingResult(data=data, attempts=tuple(attempts))

            quality -= QUALITY_STEP
            if quality < REGIME_SWITCH_QUALITY and width > REDUCED_WIDTH:
                logger.debug(
                    "Switching to reduced width",
                    extra={"width": REDUCED_WIDTH, "quality": REDUCED_WIDTH_QUALITY},
                )
                width = REDUCED_WIDTH
                quality = REDUCED_WIDTH_QUALITY

        self._check_deadline(deadline, attempts)
        data = self._attempt(image, width=FORCED_WIDTH, quality=FORCED_QUALITY, attempts=attempts)

        if len(data) > self.size_ceiling:
            logger.warning(
                "Unable to meet size ceiling",
                extra={
                    "size_ceiling": self.size_ceiling,
                    "achieved_size": len(data),
                    "attempts": len(attempts),
                },
            )
            raise EncodingError(
                message=(
                    f"Unable to compress image below {format_file_size(self.size_ceiling)}. "
                    f"Final size: {format_file_size(len(data))}"
                ),
                achieved_size=len(data),
                details={"size_ceiling": self.size_ceiling, "attempts": len(attempts)},
            )

        return EncodingResult(data=data, attempts=tuple(attempts))

    def _attempt(
        self,
        image: Image.Image,
        *,
        width: int,
        quality: int,
        attempts: list[EncodingAttempt],
    ) -> bytes:
        data = self._render(image, width=width, quality=quality)
        attempts.append(EncodingAttempt(quality=quality, width=width, size=len(data)))
        logger.debug(
            "Encoding attempt",
            extra={"width": width, "quality": quality, "size": len(data)},
        )
        return data

    def _check_deadline(self, deadline: float | None, attempts: list[EncodingAttempt]) -> None:
        if deadline is None or self._clock() < deadline:
            return

        best = min((a.size for a in attempts), default=None)
        logger.warning(
            "Encoding deadline exceeded",
            extra={"attempts": len(attempts), "best_size": best},
        )
        raise EncodingError(
            message="Image encoding took too long",
            achieved_size=best,
            error_code=ERROR_CODE_IMAGE_ENCODING_TIMEOUT,
            details={"attempts": len(attempts)},
        )

    @staticmethod
    def _decode(original: bytes) -> Image.Image:
        """Decode and normalize to RGB, flattening transparency onto white."""
        if not original:
            raise DecodeError(message="Image payload is empty")

        try:
            with Image.open(io.BytesIO(original)) as img:
                img.load()

                if img.mode in ("RGBA", "LA", "P") or "transparency" in img.info:
                    rgba = img.convert("RGBA")
                    background = Image.new("RGBA", rgba.size, (255, 255, 255, 255))
                    return Image.alpha_composite(background, rgba).convert("RGB")

                return img.convert("RGB")

        except _DECODE_FAILURES as exc:
            logger.warning(
                "Unable to decode image",
                extra={"size": len(original), "error": str(exc)},
            )
            raise DecodeError(
                message="Invalid image data",
                details={"size": len(original)},
            ) from exc

    @staticmethod
    def _render(image: Image.Image, *, width: int, quality: int) -> bytes:
        """Center-cover crop to width x width and encode as progressive JPEG."""
        fitted = ImageOps.fit(
            image,
            (width, width),
            method=Image.Resampling.LANCZOS,
            centering=(0.5, 0.5),
        )
        out = io.BytesIO()
        fitted.save(out, format="JPEG", quality=quality, progressive=True)
        return out.getvalue()
