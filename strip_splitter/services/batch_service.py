"""
Batch splitting service.

Splits every image of an input folder and writes the segments, numbered by a
single counter across the batch, into an output folder:
- images are processed one at a time, in file name order
- a progress event follows each image, plus a final one at 100%
- any decode, encode, split or progress failure aborts the whole batch
"""

import logging
from pathlib import Path
from typing import Callable

from strip_splitter.config import settings
from strip_splitter.schemas.split import ProcessResult, ProcessSettings, ProgressUpdate
from strip_splitter.splitting import SmartSplitter, SplitError
from strip_splitter.utils.image_files import ImageFileError, list_images, load_image, save_image

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[ProgressUpdate], None]


class BatchProcessingError(Exception):
    """Raised when a batch is aborted."""

    pass


class BatchService:
    """Runs the split over a folder of images."""

    def __init__(
        self,
        output_prefix: str | None = None,
        output_format: str | None = None,
        extensions: list[str] | None = None,
    ):
        """
        Initialize the batch service.

        Args:
            output_prefix: File name prefix of the segments.
            output_format: File extension (and so format) of the segments.
            extensions: Source image extensions to pick up.
        """
        self.output_prefix = output_prefix or settings.output_prefix
        self.output_format = output_format or settings.output_format
        self.extensions = extensions or settings.image_extensions

    def _output_path(self, output_dir: Path, counter: int) -> Path:
        return output_dir / f"{self.output_prefix}{counter:03d}.{self.output_format}"

    def process_images(
        self,
        input_folder: str | Path,
        output_folder: str | Path,
        process_settings: ProcessSettings,
        on_progress: ProgressCallback | None = None,
    ) -> ProcessResult:
        """
        Split every image of a folder.

        Args:
            input_folder: Folder holding the source images.
            output_folder: Folder receiving the segments, created if missing.
            process_settings: Settings shared by every image.
            on_progress: Called with a ProgressUpdate after each image.

        Returns:
            ProcessResult; success is False when no image was found.

        Raises:
            BatchProcessingError: If any image cannot be processed.
        """
        output_dir = Path(output_folder)
        try:
            output_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise BatchProcessingError(f"Failed to create output folder: {e}") from e

        image_files = list_images(Path(input_folder), self.extensions)
        if not image_files:
            logger.info(f"No images found in {input_folder}")
            return ProcessResult(
                success=False,
                message="No images found in input folder",
                output_files=[],
                total_images=0,
            )

        total_images = len(image_files)
        splitter = SmartSplitter(process_settings.to_split_settings())
        output_files: list[str] = []
        output_counter = 1

        logger.info(f"Splitting {total_images} images from {input_folder} into {output_dir}")

        for index, image_path in enumerate(image_files, start=1):
            try:
                buffer = load_image(image_path)
                result = splitter.split(buffer)

                for segment in result.segments:
                    output_path = self._output_path(output_dir, output_counter)
                    save_image(splitter.crop(buffer, segment), output_path)
                    output_files.append(str(output_path))
                    output_counter += 1
            except (ImageFileError, SplitError) as e:
                raise BatchProcessingError(str(e)) from e

            logger.info(
                f"Image {index}/{total_images} ({image_path.name}): "
                f"{result.num_segments} segments {result.heights}"
            )

            if on_progress is not None:
                progress = ProgressUpdate(
                    current=index,
                    total=total_images,
                    percentage=index / total_images * 100.0,
                    message=f"Processing image {index}/{total_images}",
                )
                try:
                    on_progress(progress)
                except Exception as e:
                    raise BatchProcessingError(f"Failed to emit progress: {e}") from e

        if on_progress is not None:
            try:
                on_progress(
                    ProgressUpdate(
                        current=total_images,
                        total=total_images,
                        percentage=100.0,
                        message="Processing complete!",
                    )
                )
            except Exception as e:
                logger.warning(f"Final progress update failed: {e}")

        logger.info(f"Batch finished: {len(output_files)} segments from {total_images} images")

        return ProcessResult(
            success=True,
            message=f"Successfully processed {total_images} images",
            output_files=output_files,
            total_images=total_images,
        )


# Singleton instance
_batch_service: BatchService | None = None


def get_batch_service() -> BatchService:
    """Get or create the batch service singleton."""
    global _batch_service
    if _batch_service is None:
        _batch_service = BatchService()
    return _batch_service
